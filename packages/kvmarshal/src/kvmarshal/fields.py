"""Field introspection for decode targets.

Targets are dataclass instances or pydantic models. For each decode call the
walker asks :func:`describe_fields` for the field list of the object in hand;
nothing is cached between calls.
"""
from __future__ import annotations

import dataclasses
import types
import typing
from dataclasses import dataclass, field
from typing import Annotated, Any, Union, get_args, get_origin

from pydantic import BaseModel

from kvmarshal.exceptions import TargetShapeError

_NoneType = type(None)

OMITEMPTY = "omitempty"


@dataclass(frozen=True, slots=True)
class TagSpec:
    """Parsed ``key[,modifier...]`` annotation."""

    key: str
    omitempty: bool = False


def parse_tag(tag: str) -> TagSpec:
    """Parse a field tag such as ``"myKey"`` or ``"myKey,omitempty"``.

    Unknown modifiers are ignored.
    """
    key, *modifiers = tag.split(",")
    return TagSpec(key=key, omitempty=OMITEMPTY in modifiers)


@dataclass(frozen=True, slots=True)
class FieldType:
    """A field annotation with ``Annotated`` and ``Optional`` peeled off."""

    annotation: Any
    base: Any
    metadata: tuple[Any, ...] = ()
    nullable: bool = False

    @property
    def is_scanner(self) -> bool:
        return is_scanner_type(self.base)

    @property
    def is_aggregate(self) -> bool:
        return is_aggregate_type(self.base)

    def marker(self, kind: type) -> Any | None:
        for item in self.metadata:
            if isinstance(item, kind):
                return item
        return None


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    name: str
    type: FieldType
    tag: str | None
    writable: bool = True


def resolve_type(annotation: Any, metadata: typing.Iterable[Any] = ()) -> FieldType:
    meta = list(metadata)
    tp = annotation
    nullable = False
    while True:
        origin = get_origin(tp)
        if origin is Annotated:
            inner, *extra = get_args(tp)
            meta.extend(extra)
            tp = inner
            continue
        if origin is Union or origin is types.UnionType:
            args = get_args(tp)
            rest = [a for a in args if a is not _NoneType]
            if len(rest) == 1 and len(rest) < len(args):
                nullable = True
                tp = rest[0]
                continue
        break
    return FieldType(annotation=annotation, base=tp, metadata=tuple(meta), nullable=nullable)


def _is_class(tp: Any) -> bool:
    return isinstance(tp, type) and get_origin(tp) is None


def is_scanner_type(tp: Any) -> bool:
    return _is_class(tp) and callable(getattr(tp, "scan", None))


def is_aggregate_type(tp: Any) -> bool:
    if not _is_class(tp):
        return False
    return dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel)


def is_frozen(obj: Any) -> bool:
    cls = obj if isinstance(obj, type) else type(obj)
    if issubclass(cls, BaseModel):
        return bool(cls.model_config.get("frozen", False))
    params = getattr(cls, "__dataclass_params__", None)
    return bool(params is not None and params.frozen)


def check_target(target: Any) -> None:
    """Raise :class:`TargetShapeError` unless *target* can be decoded into."""
    if target is None:
        raise TargetShapeError("decode target must not be None")
    if isinstance(target, type):
        raise TargetShapeError(
            f"decode target must be an instance, got class {target.__name__}"
        )
    if not is_aggregate_type(type(target)):
        raise TargetShapeError(
            f"decode target must be a dataclass or pydantic model instance, got {type(target).__name__}"
        )
    if is_frozen(target):
        raise TargetShapeError(f"decode target {type(target).__name__} is frozen")


def describe_fields(obj: Any, tag_name: str) -> list[FieldDescriptor]:
    """Return field descriptors for *obj* in declaration order."""
    if isinstance(obj, BaseModel):
        return _describe_model(obj, tag_name)
    return _describe_dataclass(obj, tag_name)


def _describe_dataclass(obj: Any, tag_name: str) -> list[FieldDescriptor]:
    cls = type(obj)
    try:
        hints = typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as exc:
        raise TargetShapeError(f"cannot resolve annotations of {cls.__name__}: {exc}") from exc

    frozen = is_frozen(cls)
    out: list[FieldDescriptor] = []
    for f in dataclasses.fields(obj):
        annotation = hints.get(f.name, f.type)
        out.append(
            FieldDescriptor(
                name=f.name,
                type=resolve_type(annotation),
                tag=_tag_of(f.metadata, tag_name),
                writable=not frozen and not f.name.startswith("_"),
            )
        )
    return out


def _describe_model(obj: BaseModel, tag_name: str) -> list[FieldDescriptor]:
    cls = type(obj)
    frozen = is_frozen(cls)
    out: list[FieldDescriptor] = []
    for name, info in cls.model_fields.items():
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        out.append(
            FieldDescriptor(
                name=name,
                type=resolve_type(info.annotation, info.metadata),
                tag=_tag_of(extra, tag_name),
                writable=not frozen and not info.frozen and not name.startswith("_"),
            )
        )
    return out


def _tag_of(mapping: typing.Mapping[str, Any], tag_name: str) -> str | None:
    tag = mapping.get(tag_name)
    if not isinstance(tag, str) or not tag:
        return None
    return tag


def new_instance(cls: type) -> Any:
    """Build a default instance of *cls* for auto-vivification."""
    if issubclass(cls, BaseModel):
        return cls.model_construct()
    try:
        return cls()
    except TypeError as exc:
        raise TargetShapeError(
            f"cannot allocate {cls.__name__}: it must be constructible without arguments"
        ) from exc


def tagged(tag: str, *, tag_name: str = "kv", **kwargs: Any) -> Any:
    """Shortcut for a dataclass field carrying a decoder tag.

    ``port: int = tagged("port", default=0)`` is the same as
    ``port: int = field(default=0, metadata={"kv": "port"})``.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[tag_name] = tag
    return field(metadata=metadata, **kwargs)


__all__ = [
    "TagSpec",
    "FieldType",
    "FieldDescriptor",
    "parse_tag",
    "resolve_type",
    "is_scanner_type",
    "is_aggregate_type",
    "is_frozen",
    "check_target",
    "describe_fields",
    "new_instance",
    "tagged",
]
