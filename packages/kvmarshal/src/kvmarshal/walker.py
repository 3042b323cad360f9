"""Depth-first traversal of a decode target.

For each tagged, writable field the walker either recurses (nested
dataclass/model without a ``scan`` hook) or issues exactly one backend
lookup and hands the result to the value. Lookups happen strictly in field
declaration order, depth first, and the first failure stops the walk.
"""
from __future__ import annotations

import logging
from typing import Any

from kvmarshal.conf.models import DecoderConfig
from kvmarshal.context import Context
from kvmarshal.exceptions import BackendError, DecodeError, TargetShapeError
from kvmarshal.fields import FieldDescriptor, describe_fields, new_instance, parse_tag
from kvmarshal.types.protocols import KV, Value
from kvmarshal.values import FieldRef, NullValue, UnmarshalOptions, as_value

logger = logging.getLogger(__name__)


class Walker:
    """State for a single decode call."""

    def __init__(self, kv: KV, config: DecoderConfig, ctx: Context) -> None:
        self.kv = kv
        self.config = config
        self.ctx = ctx
        self.opts = UnmarshalOptions(slice_sep=config.slice_separator)
        self.lookups = 0

    def walk(self, obj: Any, prefix: str) -> None:
        for fd in describe_fields(obj, self.config.tag):
            if fd.tag is None or not fd.writable:
                continue
            try:
                self._decode_field(obj, fd, prefix)
            except (DecodeError, TargetShapeError) as exc:
                exc.fields.insert(0, fd.name)
                raise

    def _decode_field(self, obj: Any, fd: FieldDescriptor, prefix: str) -> None:
        key = prefix + parse_tag(fd.tag).key
        ftype = fd.type
        ref = FieldRef(owner=obj, name=fd.name, type=ftype)

        if ftype.is_aggregate and not ftype.is_scanner:
            child = self._vivify(ref, key)
            logger.debug("kvmarshal.walk.descend field=%s key=%r", fd.name, key)
            self.walk(child, key + self.config.separator)
            return

        if ftype.is_scanner:
            self._vivify(ref, key)

        value = self._lookup(key)
        try:
            value.unmarshal_to(ref, self.opts)
        except DecodeError as exc:
            if exc.key is None:
                exc.key = key
            raise

    def _vivify(self, ref: FieldRef, key: str) -> Any:
        current = ref.get()
        if current is not None:
            return current
        try:
            instance = new_instance(ref.type.base)
        except TargetShapeError as exc:
            exc.key = key
            raise
        ref.set(instance)
        logger.debug("kvmarshal.walk.allocate field=%s type=%s", ref.name, type(instance).__name__)
        return instance

    def _lookup(self, key: str) -> Value:
        err = self.ctx.err()
        if err is not None:
            raise BackendError(str(err), key=key) from err

        self.lookups += 1
        try:
            value = as_value(self.kv.get(self.ctx, key))
        except Exception as exc:
            raise BackendError(str(exc) or type(exc).__name__, key=key) from exc

        logger.debug("kvmarshal.walk.get key=%r present=%s", key, value is not NullValue)
        return value


__all__ = ["Walker"]
