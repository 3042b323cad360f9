from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional

import pytest

from kvmarshal import FieldRef, NullValue, StringValue, UnmarshalOptions
from kvmarshal.exceptions import ParseError, ScanError, SliceSeparatorError, UnsupportedTypeError
from kvmarshal.types import Int8
from kvmarshal.values import as_value


@dataclass
class Counter:
    """Has a tagged field, but the scan hook must win."""

    value: int = field(default=0, metadata={"kv": "value"})
    scans: int = 0

    def scan(self, raw):
        self.value = len(raw)
        self.scans += 1


@dataclass
class Strict:
    def scan(self, raw):
        raise ValueError(f"bad input {raw!r}")


@dataclass
class Holder:
    text: str = ""
    small: int = 0
    wait: timedelta = timedelta(0)
    items: list[str] = field(default_factory=list)
    counter: Optional[Counter] = None
    strict: Strict = field(default_factory=Strict)
    blob: bytes = b""


OPTS = UnmarshalOptions(slice_sep=",")


def ref(holder, name, annotation):
    return FieldRef.of(holder, name, annotation)


def test_null_value_leaves_field_untouched():
    holder = Holder(text="keep", small=3)
    NullValue.unmarshal_to(ref(holder, "text", str), OPTS)
    NullValue.unmarshal_to(ref(holder, "small", int), OPTS)
    assert holder.text == "keep"
    assert holder.small == 3


def test_string_value_writes_parsed_values():
    holder = Holder()
    StringValue("hello").unmarshal_to(ref(holder, "text", str), OPTS)
    StringValue("-8").unmarshal_to(ref(holder, "small", Int8), OPTS)
    StringValue("1m").unmarshal_to(ref(holder, "wait", timedelta), OPTS)
    StringValue("hello,world").unmarshal_to(ref(holder, "items", list[str]), OPTS)

    assert holder.text == "hello"
    assert holder.small == -8
    assert holder.wait == timedelta(minutes=1)
    assert holder.items == ["hello", "world"]


def test_failed_parse_keeps_prior_value():
    holder = Holder(small=7)
    with pytest.raises(ParseError):
        StringValue("1000").unmarshal_to(ref(holder, "small", Int8), OPTS)
    assert holder.small == 7


def test_slices_need_a_separator():
    holder = Holder(items=["prior"])
    with pytest.raises(SliceSeparatorError):
        StringValue("hello,world").unmarshal_to(ref(holder, "items", list[str]), UnmarshalOptions())
    assert holder.items == ["prior"]


def test_scanner_takes_priority_and_is_allocated():
    holder = Holder()
    StringValue("abcd").unmarshal_to(ref(holder, "counter", Optional[Counter]), OPTS)
    assert holder.counter == Counter(value=4, scans=1)


def test_scanner_reuses_existing_instance():
    existing = Counter(value=1)
    holder = Holder(counter=existing)
    StringValue("xy").unmarshal_to(ref(holder, "counter", Optional[Counter]), OPTS)
    assert holder.counter is existing
    assert existing.value == 2


def test_scanner_failure_is_wrapped():
    holder = Holder()
    with pytest.raises(ScanError) as ei:
        StringValue("nope").unmarshal_to(ref(holder, "strict", Strict), OPTS)
    assert isinstance(ei.value.__cause__, ValueError)
    assert "bad input 'nope'" in str(ei.value)


def test_unsupported_type():
    holder = Holder()
    with pytest.raises(UnsupportedTypeError, match="unsupported type bytes"):
        StringValue("abc").unmarshal_to(ref(holder, "blob", bytes), OPTS)
    assert holder.blob == b""


def test_from_bytes_decodes_utf8():
    assert StringValue.from_bytes("héllo".encode()) == StringValue("héllo")


@pytest.mark.parametrize(
    "result, expected",
    [
        (None, NullValue),
        ("text", StringValue("text")),
        (b"raw", StringValue("raw")),
        (bytearray(b"arr"), StringValue("arr")),
    ],
)
def test_as_value_coerces_backend_results(result, expected):
    assert as_value(result) == expected


def test_as_value_passes_value_objects_through():
    value = StringValue("x")
    assert as_value(value) is value
    assert as_value(NullValue) is NullValue


def test_as_value_rejects_other_objects():
    with pytest.raises(TypeError):
        as_value(42)
