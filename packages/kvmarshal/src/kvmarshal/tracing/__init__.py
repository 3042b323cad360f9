# kvmarshal/tracing/__init__.py
from .tracing import decode_span, get_tracer

__all__ = [
    "decode_span",
    "get_tracer",
]
