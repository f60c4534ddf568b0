from amaranth import *
from .streams import SampleStream
from .config import check_integer

class ElasticPipeline(Elaboratable):
    def __init__(self, width, depth):
        check_integer("width", width, 1)
        check_integer("depth", depth, 0)
        self.width  = width
        self.depth  = depth
        self.rst    = Signal()
        self.input  = SampleStream(width)
        self.output = SampleStream(width)

    def elaborate(self, platform):
        m = Module()

        # Zero stages is a plain wire
        if self.depth == 0:
            m.d.comb += self.output.stream_eq(self.input)
            return m

        stages = [ ResetInserter(self.rst)(StreamStage(self.width)) for _ in range(self.depth) ]
        for i, stage in enumerate(stages):
            m.submodules[f"stage{i}"] = stage

        # No transfer is acknowledged while the stages are being cleared
        m.d.comb += stages[0].input.stream_eq(self.input, omit="ready")
        m.d.comb += self.input.ready.eq(stages[0].input.ready & ~self.rst)

        last = stages[0].output
        for stage in stages[1:]:
            m.d.comb += stage.input.stream_eq(last)
            last = stage.output
        m.d.comb += self.output.stream_eq(last)

        return m

class StreamStage(Elaboratable):
    def __init__(self, width):
        self.input  = SampleStream(width)
        self.output = SampleStream(width)

    def elaborate(self, platform):
        m = Module()
        m.d.comb += self.input.ready.eq(self.output.produce)
        # An empty stage always holds a zero payload
        with m.If(self.output.produce):
            m.d.sync += self.output.valid.eq(self.input.valid)
            m.d.sync += self.output.payload.eq(Mux(self.input.valid, self.input.payload, 0))
        return m
