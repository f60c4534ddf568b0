import random
import unittest
from dataclasses import FrozenInstanceError

from bus_pipeline.channels import Channel, ChannelCodec, Direction, channel_codecs, field_widths
from bus_pipeline.config import BusConfig, ConfigurationError

def random_fields(codec, rng):
    return { name: rng.getrandbits(field.width) for name, field in codec.layout }

class TestChannelCodec(unittest.TestCase):

    def test_channel_widths(self):
        config = BusConfig(id_width=4, addr_width=64, data_width=32)
        codecs = channel_codecs(config)
        self.assertEqual(codecs[Channel.AW].width, 4 + 64 + 8 + 3 + 2 + 1 + 4 + 3)
        self.assertEqual(codecs[Channel.AR].width, codecs[Channel.AW].width)
        self.assertEqual(codecs[Channel.W].width, 32 + 4 + 1)
        self.assertEqual(codecs[Channel.B].width, 4 + 2)
        self.assertEqual(codecs[Channel.R].width, 4 + 32 + 2 + 1)

    def test_field_order(self):
        codecs = channel_codecs(BusConfig())
        self.assertEqual(codecs[Channel.AW].field_names,
                         ("id", "addr", "len", "size", "burst", "lock", "cache", "prot"))
        self.assertEqual(codecs[Channel.W].field_names, ("data", "strb", "last"))
        self.assertEqual(codecs[Channel.B].field_names, ("id", "resp"))
        self.assertEqual(codecs[Channel.R].field_names, ("id", "data", "resp", "last"))

    def test_first_field_is_least_significant(self):
        codec = ChannelCodec.for_channel(Channel.B, BusConfig(id_width=4, resp_width=2))
        self.assertEqual(codec.pack({"id": 0x3, "resp": 0x2}), 0b10_0011)
        self.assertEqual(codec.unpack(0b01_1010), {"id": 0xA, "resp": 0x1})

    def test_bijection(self):
        rng = random.Random(42)
        for data_width in [32, 64, 512]:
            config = BusConfig(data_width=data_width)
            for channel, codec in channel_codecs(config).items():
                for _ in range(50):
                    fields = random_fields(codec, rng)
                    self.assertEqual(codec.unpack(codec.pack(fields)), fields, channel.name)

    def test_extreme_values(self):
        codec = ChannelCodec.for_channel(Channel.R, BusConfig(data_width=64))
        ones = { name: (1 << field.width) - 1 for name, field in codec.layout }
        self.assertEqual(codec.pack(ones), (1 << codec.width) - 1)
        self.assertEqual(codec.unpack((1 << codec.width) - 1), ones)
        self.assertEqual(codec.zero(), { name: 0 for name in codec.field_names })

    def test_rejects_lossy_values(self):
        codec = ChannelCodec.for_channel(Channel.B, BusConfig(id_width=4))
        with self.assertRaises(ValueError):
            codec.pack({"id": 16, "resp": 0})
        with self.assertRaises(ValueError):
            codec.pack({"id": -1, "resp": 0})
        with self.assertRaises(ValueError):
            codec.pack({"id": 1})
        with self.assertRaises(ValueError):
            codec.pack({"id": 1, "resp": 0, "user": 0})
        with self.assertRaises(ValueError):
            codec.unpack(1 << codec.width)

    def test_invalid_widths(self):
        with self.assertRaises(ConfigurationError):
            ChannelCodec({"data": 0})
        with self.assertRaises(ConfigurationError):
            ChannelCodec({})
        with self.assertRaises(ConfigurationError):
            ChannelCodec({"last": True})

    def test_directions(self):
        self.assertEqual([ ch for ch in Channel if ch.direction is Direction.RESPONSE ],
                         [Channel.B, Channel.R])
        self.assertEqual(field_widths(Channel.W, BusConfig(data_width=128))["strb"], 16)


class TestBusConfig(unittest.TestCase):

    def test_defaults(self):
        config = BusConfig()
        self.assertEqual(config.strb_width, 4)
        self.assertEqual(config.depth, 1)

    def test_invalid(self):
        for kwargs in [{"depth": -1}, {"id_width": 0}, {"addr_width": -8},
                       {"data_width": 12}, {"resp_width": 0}, {"depth": 1.5},
                       {"depth": True}, {"lock_width": True}]:
            with self.assertRaises(ConfigurationError, msg=str(kwargs)):
                BusConfig(**kwargs)

    def test_depth_zero_is_valid(self):
        self.assertEqual(BusConfig(depth=0).depth, 0)

    def test_parameters(self):
        params = {"D": 4, "ID_WIDTH": 4, "ADDR_WIDTH": 64, "DATA_WIDTH": 128,
                  "STRB_WIDTH": 16, "LEN_WIDTH": 8, "SIZE_WIDTH": 3, "BURST_WIDTH": 2,
                  "LOCK_WIDTH": 1, "CACHE_WIDTH": 4, "PROT_WIDTH": 3, "RESP_WIDTH": 2}
        config = BusConfig.from_parameters(params)
        self.assertEqual(config.depth, 4)
        self.assertEqual(config.data_width, 128)
        self.assertEqual(config.to_parameters(), params)

    def test_parameter_errors(self):
        with self.assertRaises(ConfigurationError):
            BusConfig.from_parameters({"DATA_WIDTH": 64, "STRB_WIDTH": 4})
        with self.assertRaises(ConfigurationError):
            BusConfig.from_parameters({"USER_WIDTH": 1})

    def test_immutable(self):
        config = BusConfig()
        with self.assertRaises(FrozenInstanceError):
            config.depth = 3

if __name__ == "__main__":
    unittest.main()
