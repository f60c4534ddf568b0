from enum import Enum
from amaranth import unsigned
from amaranth.lib import data

from .config import ConfigurationError, check_integer

class Direction(Enum):
    REQUEST  = "request"    # requester -> responder
    RESPONSE = "response"   # responder -> requester

class Channel(Enum):
    AW = "aw"
    W  = "w"
    B  = "b"
    AR = "ar"
    R  = "r"

    @property
    def direction(self):
        if self in (Channel.B, Channel.R):
            return Direction.RESPONSE
        return Direction.REQUEST

# Field order of every channel word, least significant field first
_ADDRESS_FIELDS = ("id", "addr", "len", "size", "burst", "lock", "cache", "prot")

CHANNEL_FIELDS = {
    Channel.AW: _ADDRESS_FIELDS,
    Channel.W:  ("data", "strb", "last"),
    Channel.B:  ("id", "resp"),
    Channel.AR: _ADDRESS_FIELDS,
    Channel.R:  ("id", "data", "resp", "last"),
}

def field_widths(channel, config):
    """Widths of the fields of `channel` under `config`, in packing order."""
    widths = {
        "id":    config.id_width,
        "addr":  config.addr_width,
        "len":   config.len_width,
        "size":  config.size_width,
        "burst": config.burst_width,
        "lock":  config.lock_width,
        "cache": config.cache_width,
        "prot":  config.prot_width,
        "data":  config.data_width,
        "strb":  config.strb_width,
        "resp":  config.resp_width,
        "last":  1,
    }
    return { name: widths[name] for name in CHANNEL_FIELDS[channel] }


class ChannelCodec:
    def __init__(self, widths, name=None):
        if not widths:
            raise ConfigurationError(f"channel {name!r} has no fields")
        for field, width in widths.items():
            check_integer(f"field {field!r} width", width, 1)
        self.name   = name
        self.layout = data.StructLayout({ field: unsigned(width) for field, width in widths.items() })
        self.width  = self.layout.size

    @classmethod
    def for_channel(cls, channel, config):
        return cls(field_widths(channel, config), name=channel.name)

    @property
    def field_names(self):
        return tuple(name for name, _ in self.layout)

    def pack(self, fields):
        missing = set(self.field_names) - set(fields)
        extra   = set(fields) - set(self.field_names)
        if missing or extra:
            raise ValueError(f"{self.name}: expected fields {self.field_names}, "
                             f"missing {sorted(missing)}, unexpected {sorted(extra)}")
        word = 0
        for name, field in self.layout:
            value = int(fields[name])
            if value < 0 or value >= (1 << field.width):
                raise ValueError(f"{self.name}.{name}={value:#x} does not fit in {field.width} bits")
            word |= value << field.offset
        return word

    def unpack(self, word):
        if word < 0 or word >= (1 << self.width):
            raise ValueError(f"{self.name}: word {word:#x} is wider than {self.width} bits")
        return { name: (word >> field.offset) & ((1 << field.width) - 1)
                 for name, field in self.layout }

    def zero(self):
        return self.unpack(0)

    def __repr__(self):
        return f"ChannelCodec({self.name}, width={self.width})"


def channel_codecs(config):
    return { channel: ChannelCodec.for_channel(channel, config) for channel in Channel }
