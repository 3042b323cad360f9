"""Leaf conversion table.

Each supported leaf annotation resolves once to a :class:`LeafSpec`, which
names a converter in :data:`CONVERTERS`. Converters are pure functions from
the raw string to a Python value; they raise :class:`ParseError` (or
:class:`SliceSeparatorError`) and never touch the target.
"""
from __future__ import annotations

import math
import re
import struct
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, get_args, get_origin

from kvmarshal.exceptions import ParseError, SliceSeparatorError
from kvmarshal.fields import FieldType
from kvmarshal.types.numbers import Bits


@dataclass(frozen=True, slots=True)
class LeafSpec:
    kind: str
    width: int | None = None
    signed: bool = True


Converter = Callable[[str, LeafSpec, str], Any]


# ---------------------------------------------------------------------------
# Duration
# ---------------------------------------------------------------------------
_DURATION_UNITS_NS: dict[str, int] = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # U+00B5 micro sign
    "μs": 1_000,  # U+03BC greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_DURATION_PART = re.compile(r"([0-9]*)(?:\.([0-9]*))?([a-zµμ]+)")
_MAX_DURATION_NS = (1 << 63) - 1
_MAX_DURATION_DIGITS = len(str(_MAX_DURATION_NS))


def parse_duration(raw: str) -> timedelta:
    """Parse a duration such as ``"300ms"``, ``"-1.5h"`` or ``"2h45m"``.

    The result is truncated to microseconds, the resolution of ``timedelta``.
    """
    s = raw
    negative = False
    if s[:1] in ("-", "+"):
        negative = s[0] == "-"
        s = s[1:]
    if s == "0":
        return timedelta(0)
    if not s:
        raise ParseError("duration", raw, reason="invalid duration")

    total_ns = 0
    pos = 0
    while pos < len(s):
        match = _DURATION_PART.match(s, pos)
        if match is None:
            raise ParseError("duration", raw, reason="invalid duration")
        whole, frac, unit = match.groups()
        if not whole and not frac:
            raise ParseError("duration", raw, reason="invalid duration")
        scale = _DURATION_UNITS_NS.get(unit)
        if scale is None:
            raise ParseError("duration", raw, reason=f"unknown unit {unit!r}")
        whole = whole.lstrip("0")
        if len(whole) > _MAX_DURATION_DIGITS:
            raise ParseError("duration", raw, reason="value out of range")
        part = int(whole or "0") * scale
        # digits past nanosecond precision are dropped
        frac = (frac or "")[:_MAX_DURATION_DIGITS]
        if frac:
            part += int(frac) * scale // (10 ** len(frac))
        total_ns += part
        if total_ns > _MAX_DURATION_NS:
            raise ParseError("duration", raw, reason="value out of range")
        pos = match.end()

    micros = total_ns // 1_000
    return timedelta(microseconds=-micros if negative else micros)


# ---------------------------------------------------------------------------
# RFC3339 time
# ---------------------------------------------------------------------------
_RFC3339 = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})"
    r"T([0-9]{2}):([0-9]{2}):([0-9]{2})(?:\.([0-9]+))?(Z|[+-][0-9]{2}:[0-9]{2})"
)


def parse_time(raw: str) -> datetime:
    """Parse an RFC3339 timestamp into an aware ``datetime``."""
    match = _RFC3339.fullmatch(raw)
    if match is None:
        raise ParseError("time", raw, reason="not an RFC3339 timestamp")
    year, month, day, hour, minute, second, frac, offset = match.groups()
    micro = int((frac or "0")[:6].ljust(6, "0"))
    if offset == "Z":
        tz = timezone.utc
    else:
        sign = -1 if offset[0] == "-" else 1
        hours, minutes = int(offset[1:3]), int(offset[4:6])
        if hours > 23 or minutes > 59:
            raise ParseError("time", raw, reason="time zone offset out of range")
        tz = timezone(sign * timedelta(hours=hours, minutes=minutes))
    try:
        return datetime(
            int(year), int(month), int(day), int(hour), int(minute), int(second), micro, tzinfo=tz
        )
    except ValueError as exc:
        raise ParseError("time", raw, reason=str(exc)) from exc


# ---------------------------------------------------------------------------
# Numbers and booleans
# ---------------------------------------------------------------------------
_INT_LITERAL = re.compile(r"[+-]?[0-9]+")
_UINT_LITERAL = re.compile(r"[0-9]+")
_MAX_INT_DIGITS = len(str(1 << 64))
_FLOAT_LITERAL = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def parse_int(raw: str, width: int = 64, *, signed: bool = True) -> int:
    kind = "int" if signed else "uint"
    literal = _INT_LITERAL if signed else _UINT_LITERAL
    if not literal.fullmatch(raw):
        raise ParseError(kind, raw, width=width, reason="invalid syntax")
    digits = raw.lstrip("+-").lstrip("0")
    # no 64-bit value has more digits; int() would also refuse huge strings
    if len(digits) > _MAX_INT_DIGITS:
        raise ParseError(kind, raw, width=width, reason="value out of range")
    value = int(digits or "0")
    if raw.startswith("-"):
        value = -value
    if signed:
        low, high = -(1 << (width - 1)), (1 << (width - 1)) - 1
    else:
        low, high = 0, (1 << width) - 1
    if not low <= value <= high:
        raise ParseError(kind, raw, width=width, reason="value out of range")
    return value


def parse_bool(raw: str) -> bool:
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise ParseError("bool", raw, reason="invalid syntax")


def parse_float(raw: str, width: int = 64) -> float:
    if not _FLOAT_LITERAL.fullmatch(raw):
        raise ParseError("float", raw, width=width, reason="invalid syntax")
    value = float(raw)
    if math.isinf(value) and "inf" not in raw.lower():
        raise ParseError("float", raw, width=width, reason="value out of range")
    if width == 32 and math.isfinite(value):
        try:
            value = struct.unpack("f", struct.pack("f", value))[0]
        except OverflowError as exc:
            raise ParseError("float", raw, width=width, reason="value out of range") from exc
    return value


def split_slice(raw: str, sep: str) -> list[str]:
    if not sep:
        raise SliceSeparatorError()
    return raw.split(sep)


# ---------------------------------------------------------------------------
# Dispatch table
# ---------------------------------------------------------------------------
CONVERTERS: dict[str, Converter] = {
    "duration": lambda raw, spec, sep: parse_duration(raw),
    "time": lambda raw, spec, sep: parse_time(raw),
    "string": lambda raw, spec, sep: raw,
    "int": lambda raw, spec, sep: parse_int(raw, spec.width or 64, signed=spec.signed),
    "bool": lambda raw, spec, sep: parse_bool(raw),
    "float": lambda raw, spec, sep: parse_float(raw, spec.width or 64),
    "strings": lambda raw, spec, sep: split_slice(raw, sep),
}


def leaf_spec(ftype: FieldType) -> LeafSpec | None:
    """Return the conversion rule for *ftype*, or ``None`` if unsupported."""
    tp = ftype.base
    bits = ftype.marker(Bits)
    if tp is timedelta:
        return LeafSpec("duration")
    if tp is datetime:
        return LeafSpec("time")
    if tp is str:
        return LeafSpec("string")
    if tp is bool:
        return LeafSpec("bool")
    if tp is int:
        if bits is None:
            return LeafSpec("int", 64)
        return LeafSpec("int", bits.size, signed=bits.signed)
    if tp is float:
        return LeafSpec("float", 32 if bits is not None and bits.size == 32 else 64)
    if get_origin(tp) is list and get_args(tp) == (str,):
        return LeafSpec("strings")
    return None


def convert(raw: str, spec: LeafSpec, slice_sep: str) -> Any:
    return CONVERTERS[spec.kind](raw, spec, slice_sep)


__all__ = [
    "LeafSpec",
    "CONVERTERS",
    "leaf_spec",
    "convert",
    "parse_duration",
    "parse_time",
    "parse_int",
    "parse_bool",
    "parse_float",
    "split_slice",
]
