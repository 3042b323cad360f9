import pytest

from kvmarshal import Context


class RecordingKV:
    """Backend double that returns raw strings and records lookup order."""

    def __init__(self, data=None, *, on_get=None):
        self.data = dict(data or {})
        self.calls = []
        self._on_get = on_get

    def get(self, ctx, key):
        self.calls.append(key)
        if self._on_get is not None:
            self._on_get(key)
        ctx.check()
        return self.data.get(key)


class FailingKV:
    def __init__(self, exc):
        self.exc = exc
        self.calls = []

    def get(self, ctx, key):
        self.calls.append(key)
        raise self.exc


@pytest.fixture()
def recording_kv():
    def _make(data=None, **kwargs):
        return RecordingKV(data, **kwargs)

    return _make


@pytest.fixture()
def background():
    return Context.background()


@pytest.fixture()
def failing_kv():
    return FailingKV
