from .numbers import (
    Bits,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    UInt,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)
from .protocols import KV, Scanner, Value

__all__ = [
    "KV",
    "Value",
    "Scanner",
    "Bits",
    "Int8", "Int16", "Int32", "Int64",
    "UInt8", "UInt16", "UInt32", "UInt64", "UInt",
    "Float32", "Float64",
]
