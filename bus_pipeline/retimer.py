import logging
from amaranth import Elaboratable, Module, Signal

from .channels import Channel, Direction, channel_codecs
from .pipeline import ElasticPipeline
from .streams import ChannelStream

logger = logging.getLogger(__name__)

class BusRetimer(Elaboratable):
    def __init__(self, config):
        self.config = config
        self.codecs = channel_codecs(config)
        self.rst    = Signal()

        # Requester side
        self.s_aw = ChannelStream(self.codecs[Channel.AW])
        self.s_w  = ChannelStream(self.codecs[Channel.W])
        self.s_b  = ChannelStream(self.codecs[Channel.B])
        self.s_ar = ChannelStream(self.codecs[Channel.AR])
        self.s_r  = ChannelStream(self.codecs[Channel.R])
        # Responder side
        self.m_aw = ChannelStream(self.codecs[Channel.AW])
        self.m_w  = ChannelStream(self.codecs[Channel.W])
        self.m_b  = ChannelStream(self.codecs[Channel.B])
        self.m_ar = ChannelStream(self.codecs[Channel.AR])
        self.m_r  = ChannelStream(self.codecs[Channel.R])

        logger.debug("retimer depth=%d widths=%s", config.depth,
                     { ch.name: codec.width for ch, codec in self.codecs.items() })

    def port(self, side, channel):
        return getattr(self, f"{side}_{channel.value}")

    def endpoints(self, channel):
        """(source, sink) streams of `channel`, in its flow direction."""
        s, m = self.port("s", channel), self.port("m", channel)
        if channel.direction is Direction.RESPONSE:
            return m, s
        return s, m

    def elaborate(self, platform):
        m = Module()

        for channel in Channel:
            pipe = ElasticPipeline(self.codecs[channel].width, self.config.depth)
            m.submodules[f"{channel.value}_pipe"] = pipe

            source, sink = self.endpoints(channel)
            m.d.comb += [
                pipe.rst.eq(self.rst),
                pipe.input.stream_eq(source),
                sink.stream_eq(pipe.output),
            ]

        return m
