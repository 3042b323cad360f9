# kvmarshal/exceptions/decode.py
"""Per-field decode errors.

Every error raised while walking a target carries the backend key and the
chain of field names that led to it. The walker fills both in as the error
propagates, so the concrete class survives and callers can still do
``except ParseError``.
"""
from kvmarshal.exceptions.base import ConfigError, FieldPathMixin, KVMarshalError

__all__ = [
    "DecodeError",
    "BackendError",
    "ParseError",
    "ScanError",
    "UnsupportedTypeError",
    "SliceSeparatorError",
]


class DecodeError(FieldPathMixin, KVMarshalError):
    """Base error for a failure tied to a single field."""

    def __init__(self, message: str, *, key: str | None = None):
        super().__init__(message)
        self._init_path(message, key)


class BackendError(DecodeError):
    """The key-value backend failed (including cancellation)."""


class ParseError(DecodeError):
    """A raw string does not match the expected leaf grammar."""

    def __init__(
        self,
        kind: str,
        raw: str,
        *,
        width: int | None = None,
        reason: str | None = None,
        key: str | None = None,
    ):
        label = f"{kind}{width}" if width is not None else kind
        message = f"parse {label} from {raw!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, key=key)
        self.kind = kind
        self.width = width
        self.raw = raw


class ScanError(DecodeError):
    """A custom ``scan`` hook rejected the value."""


class UnsupportedTypeError(DecodeError):
    """The field type has no conversion rule and no scan hook."""


class SliceSeparatorError(DecodeError, ConfigError):
    """A sequence field was decoded without a slice separator."""

    def __init__(self, message: str = "slice separator is not set", *, key: str | None = None):
        super().__init__(message, key=key)
