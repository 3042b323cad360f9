# kvmarshal/types/protocols.py
from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from kvmarshal.context import Context
    from kvmarshal.values import FieldRef, UnmarshalOptions

__all__ = ["KV", "Value", "Scanner"]


class Value(Protocol):
    """A raw lookup result that knows how to write itself into a field."""

    def unmarshal_to(self, ref: "FieldRef", opts: "UnmarshalOptions") -> None: ...


class KV(Protocol):
    """Key-value storage consumed by the decoder.

    ``get`` returns :data:`kvmarshal.values.NullValue` for a missing key and
    raises only for backend-level failures.
    """

    def get(self, ctx: "Context", key: str) -> Value: ...


@runtime_checkable
class Scanner(Protocol):
    """A type that parses a raw string by itself.

    Example::

        @dataclass
        class Endpoint:
            host: str = ""
            port: int = 0

            def scan(self, raw: str) -> None:
                host, _, port = raw.partition(":")
                self.host, self.port = host, int(port)

    A scanner always wins over the built-in conversions, even when the type
    is a dataclass the decoder could otherwise recurse into.
    """

    def scan(self, raw: str) -> None: ...
