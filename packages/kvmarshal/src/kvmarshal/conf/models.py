# kvmarshal/conf/models.py
from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, ValidationError, ValidationInfo, field_validator

from kvmarshal.exceptions import ConfigError

from .defaults import DEFAULTS

_SETTING_FIELDS = {
    "SEPARATOR": "separator",
    "SLICE_SEPARATOR": "slice_separator",
    "TAG": "tag",
    "PREFIX": "prefix",
}

_EMPTY_MESSAGES = {
    "separator": "empty key separator",
    "slice_separator": "empty slice separator",
    "tag": "empty tag name",
}


class DecoderConfig(BaseModel):
    """
    Immutable decoder configuration.

    Every invalid option is reported, not just the first: pydantic validates
    all fields before raising, and :meth:`build` folds the result into a
    single :class:`ConfigError`.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    separator: str = DEFAULTS["SEPARATOR"]
    slice_separator: str = DEFAULTS["SLICE_SEPARATOR"]
    tag: str = DEFAULTS["TAG"]
    prefix: str = DEFAULTS["PREFIX"]

    @field_validator("separator", "slice_separator", "tag")
    @classmethod
    def not_empty(cls, value: str, info: ValidationInfo) -> str:
        if value == "":
            raise ValueError(_EMPTY_MESSAGES[info.field_name])
        return value

    @classmethod
    def build(cls, base: "DecoderConfig | None" = None, **options: Any) -> "DecoderConfig":
        """Return *base* (or the defaults) with *options* applied.

        Raises :class:`ConfigError` listing every invalid option.
        """
        data = base.model_dump() if base is not None else {}
        data.update(options)
        try:
            return cls(**data)
        except ValidationError as exc:
            errors = [ConfigError(_describe(err)) for err in exc.errors()]
            message = "; ".join(str(e) for e in errors)
            raise ConfigError(f"invalid decoder options: {message}", errors=errors) from exc

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> "DecoderConfig":
        options = {
            field: settings[key] for key, field in _SETTING_FIELDS.items() if key in settings
        }
        return cls.build(**options)


def _describe(err: Mapping[str, Any]) -> str:
    loc = ".".join(str(part) for part in err.get("loc", ())) or "options"
    msg = str(err.get("msg", "invalid value"))
    # pydantic prefixes messages raised from validators
    msg = msg.removeprefix("Value error, ")
    return f"{loc}: {msg}"


__all__ = ["DecoderConfig"]
