"""In-memory key-value backend."""
from __future__ import annotations

from typing import Iterator, Mapping

from kvmarshal.context import Context
from kvmarshal.types.protocols import Value
from kvmarshal.values import NullValue, StringValue


class MapKV:
    """Raw strings held in a dict, usable as a decoder backend.

        kv = MapKV({"host": "localhost", "logger/level": "info"})
    """

    def __init__(self, data: Mapping[str, str] | None = None, **items: str) -> None:
        self.data: dict[str, str] = dict(data or {})
        self.data.update(items)

    def get(self, ctx: Context, key: str) -> Value:
        ctx.check()
        if key not in self.data:
            return NullValue
        return StringValue(self.data[key])

    def set(self, key: str, value: str) -> "MapKV":
        self.data[key] = value
        return self

    def __contains__(self, key: object) -> bool:
        return key in self.data

    def __iter__(self) -> Iterator[str]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"MapKV({self.data!r})"
