import logging
from collections import namedtuple

from .channels import channel_codecs
from .checker import HandshakeChecker
from .config import check_integer

logger = logging.getLogger(__name__)

Stage      = namedtuple("Stage", ["occupied", "payload"])
StepResult = namedtuple("StepResult", ["upstream_ready", "downstream_valid", "downstream_payload"])


class ElasticPipelineModel:
    """Cycle-accurate model of :class:`~bus_pipeline.pipeline.ElasticPipeline`."""
    def __init__(self, width, depth, *, checked=False, name="pipeline"):
        check_integer("width", width, 1)
        check_integer("depth", depth, 0)
        self.width = width
        self.depth = depth
        self.name  = name
        self._occupied = [False] * depth
        self._payload  = [0] * depth
        self._last     = StepResult(False, False, 0)
        if checked:
            self.upstream_checker   = HandshakeChecker(f"{name}.upstream")
            self.downstream_checker = HandshakeChecker(f"{name}.downstream")
        else:
            self.upstream_checker = self.downstream_checker = None

    @property
    def stages(self):
        return [ Stage(o, p) for o, p in zip(self._occupied, self._payload) ]

    @property
    def occupancy(self):
        return sum(self._occupied)

    @property
    def downstream_valid(self):
        # Depth 0 has no state and reports its latest step
        if self.depth == 0:
            return self._last.downstream_valid
        return self._occupied[-1]

    @property
    def downstream_payload(self):
        if self.depth == 0:
            return self._last.downstream_payload
        return self._payload[-1]

    def reset(self):
        self._occupied = [False] * self.depth
        self._payload  = [0] * self.depth
        self._last     = StepResult(False, False, 0)
        for checker in (self.upstream_checker, self.downstream_checker):
            if checker is not None:
                checker.reset()

    def step(self, upstream_valid, upstream_payload, downstream_ready, *, reset=False):
        upstream_valid   = bool(upstream_valid)
        downstream_ready = bool(downstream_ready)
        if upstream_valid and not 0 <= upstream_payload < (1 << self.width):
            raise ValueError(f"{self.name}: payload {upstream_payload:#x} does not fit in "
                             f"{self.width} bits")

        if self.depth == 0:
            result = StepResult(downstream_ready, upstream_valid, upstream_payload)
            self._check(result, downstream_ready, upstream_valid, upstream_payload, reset)
            self._last = result
            return result

        if reset:
            self.reset()
            return StepResult(False, False, 0)

        occupied, payload = self._occupied, self._payload
        depth = self.depth

        accept = [False] * depth + [downstream_ready]
        for i in reversed(range(depth)):
            accept[i] = not occupied[i] or accept[i + 1]

        self._check(StepResult(accept[0], occupied[-1], payload[-1]),
                    downstream_ready, upstream_valid, upstream_payload, reset)

        next_occupied = list(occupied)
        next_payload  = list(payload)
        if accept[0]:
            next_occupied[0] = upstream_valid
            next_payload[0]  = upstream_payload if upstream_valid else 0
        for i in range(1, depth):
            if accept[i]:
                next_occupied[i] = occupied[i - 1]
                next_payload[i]  = payload[i - 1]

        self._occupied, self._payload = next_occupied, next_payload
        self._last = StepResult(accept[0], next_occupied[-1], next_payload[-1])
        return self._last

    def _check(self, presented, downstream_ready, upstream_valid, upstream_payload, reset):
        if self.upstream_checker is None:
            return
        if reset:
            self.upstream_checker.reset()
            self.downstream_checker.reset()
            return
        self.upstream_checker.observe(upstream_valid, upstream_payload, presented.upstream_ready)
        self.downstream_checker.observe(presented.downstream_valid, presented.downstream_payload,
                                        downstream_ready)


class ChannelInput(namedtuple("ChannelInput", ["valid", "fields", "ready"])):
    # `fields` may be None while `valid` is low
    __slots__ = ()

IDLE = ChannelInput(False, None, False)

ChannelOutput = namedtuple("ChannelOutput", ["ready", "valid", "fields"])


class BusRetimerModel:
    def __init__(self, config, *, checked=False):
        self.config    = config
        self.codecs    = channel_codecs(config)
        self.pipelines = { channel: ElasticPipelineModel(codec.width, config.depth,
                                                         checked=checked, name=channel.name)
                           for channel, codec in self.codecs.items() }
        logger.debug("retimer model depth=%d widths=%s", config.depth,
                     { ch.name: codec.width for ch, codec in self.codecs.items() })

    def reset(self):
        for pipeline in self.pipelines.values():
            pipeline.reset()

    def step(self, inputs=None, *, reset=False):
        """Advance every channel by one cycle.

        `inputs` maps :class:`~bus_pipeline.channels.Channel` to
        :class:`ChannelInput`; channels not listed are idle. Returns a dict of
        :class:`ChannelOutput` for every channel, with `fields` unpacked from
        the (post-cycle) output payload.
        """
        inputs = inputs or {}
        outputs = {}
        for channel, pipeline in self.pipelines.items():
            drive = inputs.get(channel, IDLE)
            codec = self.codecs[channel]
            payload = codec.pack(drive.fields) if drive.valid else 0
            result = pipeline.step(drive.valid, payload, drive.ready, reset=reset)
            outputs[channel] = ChannelOutput(result.upstream_ready, result.downstream_valid,
                                             codec.unpack(result.downstream_payload))
        return outputs

    def presented(self, channel):
        """Fields presented to the receiver of `channel` before the next step."""
        pipeline = self.pipelines[channel]
        return pipeline.downstream_valid, self.codecs[channel].unpack(pipeline.downstream_payload)
