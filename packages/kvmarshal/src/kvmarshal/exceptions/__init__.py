from .base import (
    ConfigError,
    ContextCancelledError,
    ContextError,
    DeadlineExceededError,
    KVMarshalError,
    TargetShapeError,
)
from .decode import (
    BackendError,
    DecodeError,
    ParseError,
    ScanError,
    SliceSeparatorError,
    UnsupportedTypeError,
)

__all__ = [
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
