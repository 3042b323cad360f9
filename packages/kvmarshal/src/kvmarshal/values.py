"""Backend values and the field references they are written into."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, get_origin

from kvmarshal.exceptions import ScanError, UnsupportedTypeError
from kvmarshal.fields import FieldType, new_instance, resolve_type
from kvmarshal.leaf import convert, leaf_spec

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UnmarshalOptions:
    """Options for :meth:`Value.unmarshal_to`.

    ``slice_sep`` splits raw strings for ``list[str]`` fields; an empty
    separator makes such fields fail instead of falling back to no split.
    """

    slice_sep: str = ""


@dataclass(frozen=True, slots=True)
class FieldRef:
    """A writable slot: one attribute of one object, with its resolved type."""

    owner: Any
    name: str
    type: FieldType

    @classmethod
    def of(cls, owner: Any, name: str, annotation: Any) -> "FieldRef":
        return cls(owner=owner, name=name, type=resolve_type(annotation))

    def get(self) -> Any:
        # model_construct() leaves required fields without a default unset
        return getattr(self.owner, self.name, None)

    def set(self, value: Any) -> None:
        setattr(self.owner, self.name, value)


class _NullValue:
    """Absent key. Unmarshalling it leaves the field untouched."""

    __slots__ = ()

    def unmarshal_to(self, ref: FieldRef, opts: UnmarshalOptions) -> None:
        return None

    def __repr__(self) -> str:
        return "NullValue"


NullValue = _NullValue()


class StringValue:
    """A present value holding a raw string.

    Supported field types: ``str``, ``int`` (and the fixed-width aliases in
    :mod:`kvmarshal.types`), ``bool``, ``float`` / ``Float32``,
    ``datetime.timedelta``, ``datetime.datetime`` (RFC3339), ``list[str]``
    and any type with a ``scan(raw)`` method.
    """

    __slots__ = ("raw",)

    def __init__(self, raw: str) -> None:
        self.raw = raw

    @classmethod
    def from_bytes(cls, data: bytes, encoding: str = "utf-8") -> "StringValue":
        return cls(data.decode(encoding))

    def unmarshal_to(self, ref: FieldRef, opts: UnmarshalOptions) -> None:
        ftype = ref.type
        if ftype.is_scanner:
            self._scan_into(ref)
            return

        spec = leaf_spec(ftype)
        if spec is None:
            raise UnsupportedTypeError(f"unsupported type {_type_label(ftype)}")
        ref.set(convert(self.raw, spec, opts.slice_sep))

    def _scan_into(self, ref: FieldRef) -> None:
        target = ref.get()
        allocated = target is None
        if allocated:
            target = new_instance(ref.type.base)
            logger.debug("allocated %s for scan of field %s", type(target).__name__, ref.name)
        try:
            target.scan(self.raw)
        except Exception as exc:
            raise ScanError(f"scan {type(target).__name__}: {exc}") from exc
        if allocated:
            ref.set(target)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StringValue):
            return NotImplemented
        return self.raw == other.raw

    def __hash__(self) -> int:
        return hash(self.raw)

    def __repr__(self) -> str:
        return f"StringValue({self.raw!r})"


def _type_label(ftype: FieldType) -> str:
    base = ftype.base
    if get_origin(base) is None and isinstance(base, type):
        return base.__name__
    return repr(base)


def as_value(result: Any) -> Any:
    """Coerce a backend result into a value.

    Backends may return a value object directly, or the raw lookup result:
    ``None`` for an absent key, ``str`` or ``bytes`` for a present one.
    """
    if result is None:
        return NullValue
    if isinstance(result, str):
        return StringValue(result)
    if isinstance(result, (bytes, bytearray, memoryview)):
        return StringValue.from_bytes(bytes(result))
    if callable(getattr(result, "unmarshal_to", None)):
        return result
    raise TypeError(f"backend returned unsupported value {type(result).__name__}")


__all__ = ["FieldRef", "NullValue", "StringValue", "UnmarshalOptions", "as_value"]
