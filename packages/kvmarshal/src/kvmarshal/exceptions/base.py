# kvmarshal/exceptions/base.py


class KVMarshalError(Exception):
    """Base for all kvmarshal exceptions."""


class FieldPathMixin:
    """Backend key and field-name chain, filled in by the walker as an error propagates."""

    def _init_path(self, message: str, key: str | None) -> None:
        self.message = message
        self.key = key
        self.fields: list[str] = []

    @property
    def field_path(self) -> str:
        return ".".join(self.fields)

    def __str__(self) -> str:
        parts = []
        if self.fields:
            parts.append(f"decode field {self.field_path}")
        if self.key is not None:
            parts.append(f"key {self.key!r}")
        if not parts:
            return self.message
        return f"{': '.join(parts)}: {self.message}"


# ----------------------------------------------------------------------------
# Construction / shape errors
# ----------------------------------------------------------------------------
class ConfigError(KVMarshalError):
    """Invalid decoder options.

    When several options are invalid at once, a single ConfigError is raised
    and each individual problem is available in ``errors``.
    """

    def __init__(self, message: str, *, errors: list["ConfigError"] | None = None):
        super().__init__(message)
        self.errors: list[ConfigError] = list(errors or [])


class TargetShapeError(FieldPathMixin, KVMarshalError):
    """Decode target is not a writable dataclass or pydantic model instance.

    Raised for the root target before any lookup, or for a nested field the
    walker cannot allocate; in the latter case ``fields`` and ``key`` locate it.
    """

    def __init__(self, message: str, *, key: str | None = None):
        super().__init__(message)
        self._init_path(message, key)


# ----------------------------------------------------------------------------
# Cancellation
# ----------------------------------------------------------------------------
class ContextError(KVMarshalError): ...


class ContextCancelledError(ContextError):
    def __init__(self, message: str = "context cancelled"):
        super().__init__(message)


class DeadlineExceededError(ContextError):
    def __init__(self, message: str = "context deadline exceeded"):
        super().__init__(message)
