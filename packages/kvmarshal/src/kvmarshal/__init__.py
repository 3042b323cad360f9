"""
kvmarshal: decode flat key-value stores into nested dataclasses and models.

Fields opt in with a tag naming their key segment; nested dataclasses and
pydantic models become key prefixes joined with a separator::

    @dataclass
    class Logger:
        level: str = tagged("level", default="")

    @dataclass
    class Config:
        host: str = tagged("host", default="")
        port: int = tagged("port", default=0)
        logger: Logger | None = tagged("logger", default=None)

    cfg = Config()
    unmarshal(MapKV({"host": "db", "port": "5432", "logger/level": "info"}), cfg)

Import Guidelines:
------------------
- Use `kvmarshal.Decoder` for configured decoding, `unmarshal` for defaults.
- Use `kvmarshal.types` for fixed-width numeric annotations and protocols.
- Use `kvmarshal.exceptions` for standardized error handling.
"""
from importlib.metadata import PackageNotFoundError, version

from .backends import MapKV
from .conf import DecoderConfig, Settings
from .context import Context
from .decoder import Decoder, aunmarshal, unmarshal
from .exceptions import (
    BackendError,
    ConfigError,
    ContextCancelledError,
    ContextError,
    DeadlineExceededError,
    DecodeError,
    KVMarshalError,
    ParseError,
    ScanError,
    SliceSeparatorError,
    TargetShapeError,
    UnsupportedTypeError,
)
from .fields import TagSpec, parse_tag, tagged
from .types import KV, Scanner, Value
from .values import FieldRef, NullValue, StringValue, UnmarshalOptions

try:
    __version__ = version("kvmarshal")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "Decoder",
    "DecoderConfig",
    "Settings",
    "Context",
    "unmarshal",
    "aunmarshal",
    "MapKV",
    "KV",
    "Value",
    "Scanner",
    "FieldRef",
    "NullValue",
    "StringValue",
    "UnmarshalOptions",
    "TagSpec",
    "parse_tag",
    "tagged",
    "KVMarshalError",
    "ConfigError",
    "TargetShapeError",
    "ContextError",
    "ContextCancelledError",
    "DeadlineExceededError",
    "DecodeError",
    "BackendError",
    "ParseError",
    "ScanError",
    "SliceSeparatorError",
    "UnsupportedTypeError",
]
