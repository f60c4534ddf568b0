from dataclasses import dataclass, fields


class ConfigurationError(ValueError):
    pass


def check_integer(name, value, minimum):
    # bool is an int subclass, but never a valid width or depth
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, not {value!r}")
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, not {value}")


# Field width parameters and their names as HDL parameters
_PARAMETER_NAMES = {
    "depth":       "D",
    "id_width":    "ID_WIDTH",
    "addr_width":  "ADDR_WIDTH",
    "data_width":  "DATA_WIDTH",
    "len_width":   "LEN_WIDTH",
    "size_width":  "SIZE_WIDTH",
    "burst_width": "BURST_WIDTH",
    "lock_width":  "LOCK_WIDTH",
    "cache_width": "CACHE_WIDTH",
    "prot_width":  "PROT_WIDTH",
    "resp_width":  "RESP_WIDTH",
}


@dataclass(frozen=True)
class BusConfig:
    depth: int        = 1
    id_width: int     = 4
    addr_width: int   = 64
    data_width: int   = 32
    len_width: int    = 8
    size_width: int   = 3
    burst_width: int  = 2
    lock_width: int   = 1
    cache_width: int  = 4
    prot_width: int   = 3
    resp_width: int   = 2

    def __post_init__(self):
        for f in fields(self):
            check_integer(f.name, getattr(self, f.name), 0 if f.name == "depth" else 1)
        if self.data_width % 8 != 0:
            raise ConfigurationError(f"data_width must be a multiple of 8, not {self.data_width}")

    @property
    def strb_width(self):
        return self.data_width // 8

    @classmethod
    def from_parameters(cls, parameters):
        """Build a configuration from HDL-style parameters (`D`, `ID_WIDTH`, ...).

        Missing parameters take their defaults. `STRB_WIDTH` is accepted but must
        agree with `DATA_WIDTH / 8`.
        """
        known = set(_PARAMETER_NAMES.values()) | {"STRB_WIDTH"}
        unknown = set(parameters) - known
        if unknown:
            raise ConfigurationError(f"unknown parameters: {', '.join(sorted(unknown))}")
        kwargs = { attr: int(parameters[param]) for attr, param in _PARAMETER_NAMES.items()
                   if param in parameters }
        config = cls(**kwargs)
        if "STRB_WIDTH" in parameters and int(parameters["STRB_WIDTH"]) != config.strb_width:
            raise ConfigurationError(
                f"STRB_WIDTH={parameters['STRB_WIDTH']} does not match "
                f"DATA_WIDTH/8={config.strb_width}")
        return config

    def to_parameters(self):
        params = { param: getattr(self, attr) for attr, param in _PARAMETER_NAMES.items() }
        params["STRB_WIDTH"] = self.strb_width
        return params
