from amaranth import Signal, tracer
from amaranth.lib import data

class StreamProperties:
    @property
    def produce(self):
        return self.ready | ~self.valid

    def stream_eq(self, source, *, omit=()):
        """Drive this stream from `source`: forward valid/payload, return ready."""
        omit = {omit} if isinstance(omit, str) else set(omit)
        stmts = []
        if "valid" not in omit:
            stmts.append(self.valid.eq(source.valid))
        if "payload" not in omit:
            stmts.append(self.payload.eq(source.payload))
        if "ready" not in omit:
            stmts.append(source.ready.eq(self.ready))
        return stmts

class SampleStream(StreamProperties):
    def __init__(self, width, name=None):
        name   = name or tracer.get_var_name(depth=2, default=None)
        prefix = f"{name}_" if name else ""
        self.valid   = Signal(name=prefix + "valid")
        self.ready   = Signal(name=prefix + "ready")
        self.payload = Signal(width, name=prefix + "payload")

class ChannelStream(SampleStream):
    def __init__(self, codec, name=None):
        name = name or tracer.get_var_name(depth=2, default=None)
        super().__init__(codec.width, name=name)
        self.codec  = codec
        # Named access to the packed fields, e.g. `fields["addr"]`
        self.fields = data.View(codec.layout, self.payload)
