# kvmarshal/types/numbers.py
"""Fixed-width numeric annotations.

Python has a single ``int`` and ``float``; these aliases attach the bit width
the leaf parser should range-check against::

    @dataclass
    class Limits:
        retries: UInt8 = field(default=0, metadata={"kv": "retries"})
        ratio: Float32 = field(default=0.0, metadata={"kv": "ratio"})

Plain ``int`` is treated as a signed 64-bit integer and plain ``float`` as a
64-bit float.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated


@dataclass(frozen=True, slots=True)
class Bits:
    size: int
    signed: bool = True


Int8 = Annotated[int, Bits(8)]
Int16 = Annotated[int, Bits(16)]
Int32 = Annotated[int, Bits(32)]
Int64 = Annotated[int, Bits(64)]

UInt8 = Annotated[int, Bits(8, signed=False)]
UInt16 = Annotated[int, Bits(16, signed=False)]
UInt32 = Annotated[int, Bits(32, signed=False)]
UInt64 = Annotated[int, Bits(64, signed=False)]
UInt = UInt64

Float32 = Annotated[float, Bits(32)]
Float64 = Annotated[float, Bits(64)]

__all__ = [
    "Bits",
    "Int8", "Int16", "Int32", "Int64",
    "UInt8", "UInt16", "UInt32", "UInt64", "UInt",
    "Float32", "Float64",
]
