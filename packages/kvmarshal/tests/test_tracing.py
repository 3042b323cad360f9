import pytest

from kvmarshal.tracing import decode_span, get_tracer


def test_get_tracer_returns_tracer():
    assert get_tracer() is not None


def test_decode_span_reraises():
    with pytest.raises(ValueError):
        with decode_span("kvmarshal.test", attributes={"kvmarshal.prefix": "", "skip": None}):
            raise ValueError("boom")


def test_decode_span_accepts_sequences():
    with decode_span("kvmarshal.test", attributes={"keys": ["a", "b", 3, object()]}) as span:
        assert span is not None
