"""Decoder façade: configuration, target validation, and entry points."""
from __future__ import annotations

import logging
from typing import Any, Mapping

from asgiref.sync import sync_to_async

from kvmarshal.conf.models import DecoderConfig
from kvmarshal.conf.settings import Settings
from kvmarshal.context import Context
from kvmarshal.fields import check_target
from kvmarshal.tracing import decode_span
from kvmarshal.types.protocols import KV
from kvmarshal.utils.dict_utils import clean_kwargs
from kvmarshal.walker import Walker

logger = logging.getLogger(__name__)


class Decoder:
    """Reads values from a key-value backend and decodes them into a target.

    Options left as ``None`` fall back to *config* (or the defaults)::

        decoder = Decoder(kv, separator="/", tag="kv", prefix="app/")
        decoder.decode(cfg)

    All invalid options are reported together in one :class:`ConfigError`.
    """

    def __init__(
        self,
        kv: KV,
        *,
        config: DecoderConfig | None = None,
        separator: str | None = None,
        slice_separator: str | None = None,
        tag: str | None = None,
        prefix: str | None = None,
    ) -> None:
        self.kv = kv
        self.config = DecoderConfig.build(
            config,
            **clean_kwargs(
                {
                    "separator": separator,
                    "slice_separator": slice_separator,
                    "tag": tag,
                    "prefix": prefix,
                }
            ),
        )

    @classmethod
    def from_settings(cls, kv: KV, settings: Mapping[str, Any] | None = None) -> "Decoder":
        """Build a decoder from layered :class:`Settings` (defaults if omitted)."""
        if settings is None:
            settings = Settings()
        return cls(kv, config=DecoderConfig.from_settings(settings))

    def decode(self, target: Any, ctx: Context | None = None) -> None:
        """Populate *target* in place.

        *ctx* is checked before every backend lookup; a cancelled or expired
        context aborts the decode with a :class:`BackendError`.
        """
        if ctx is None:
            ctx = Context.background()

        target_name = type(target).__name__
        attrs = {
            "kvmarshal.target": target_name,
            "kvmarshal.prefix": self.config.prefix,
            "kvmarshal.tag": self.config.tag,
        }
        with decode_span("kvmarshal.decode", attributes=attrs) as span:
            check_target(target)
            walker = Walker(self.kv, self.config, ctx)
            logger.debug("kvmarshal.decode.start target=%s prefix=%r", target_name, self.config.prefix)
            walker.walk(target, self.config.prefix)
            span.set_attribute("kvmarshal.lookups", walker.lookups)
            logger.debug("kvmarshal.decode.done target=%s lookups=%d", target_name, walker.lookups)

    async def adecode(self, target: Any, ctx: Context | None = None) -> None:
        """Async variant of :meth:`decode`; the walk runs in a worker thread."""
        await sync_to_async(self.decode)(target, ctx)

    def __repr__(self) -> str:
        return f"<Decoder kv={type(self.kv).__name__} config={self.config!r}>"


def unmarshal(kv: KV, target: Any, ctx: Context | None = None) -> None:
    """Decode *target* from *kv* using the default configuration."""
    Decoder(kv).decode(target, ctx)


async def aunmarshal(kv: KV, target: Any, ctx: Context | None = None) -> None:
    await Decoder(kv).adecode(target, ctx)


__all__ = ["Decoder", "aunmarshal", "unmarshal"]
