"""Layered decoder settings: defaults, then modules, env, and mappings.

Only the names in :data:`DEFAULTS` are decoder settings. Setting any other
name directly is a :class:`ConfigError`; overlays read from modules or the
environment simply ignore names they do not recognise.
"""

import importlib
import os
from collections import ChainMap
from typing import Any, Iterator, Mapping, MutableMapping

from kvmarshal.exceptions import ConfigError

from .defaults import DEFAULTS

SETTINGS_MODULE_ENVVAR = "KVMARSHAL_CONFIG_MODULE"
ENVIRON_NAMESPACE = "KVMARSHAL"


class Settings(MutableMapping[str, Any]):
    """Decoder settings layered over :data:`DEFAULTS`; later layers win."""

    def __init__(self, *layers: Mapping[str, Any]) -> None:
        checked = [_checked(layer) for layer in layers]
        self._storage = ChainMap({}, *reversed(checked), dict(DEFAULTS))

    def __getitem__(self, key: str) -> Any:
        return self._storage[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._storage.maps[0].update(_checked({key: value}))

    def __delitem__(self, key: str) -> None:
        del self._storage.maps[0][key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._storage)

    def __len__(self) -> int:
        return len(self._storage)

    # Overlays ---------------------------------------------------------
    def update_from_object(self, obj: str, *, namespace: str | None = None) -> None:
        """Overlay upper-case settings defined in module *obj*, e.g. ``TAG = "consul"``."""
        module = importlib.import_module(obj)
        self._storage.maps[0].update(_select(vars(module), namespace))

    def update_from_envvar(self, envvar: str = SETTINGS_MODULE_ENVVAR, *, namespace: str | None = None) -> None:
        module_name = os.environ.get(envvar)
        if not module_name:
            return
        self.update_from_object(module_name, namespace=namespace)

    def update_from_environ(self, namespace: str = ENVIRON_NAMESPACE, environ: Mapping[str, str] | None = None) -> None:
        """Overlay ``<namespace>_<NAME>`` environment variables, e.g. ``KVMARSHAL_PREFIX``."""
        self._storage.maps[0].update(_select(os.environ if environ is None else environ, namespace))


def _checked(mapping: Mapping[str, Any]) -> dict[str, Any]:
    unknown = sorted(k for k in mapping if k not in DEFAULTS)
    if unknown:
        raise ConfigError(f"unknown decoder setting(s): {', '.join(unknown)}")
    return dict(mapping)


def _select(mapping: Mapping[str, Any], namespace: str | None) -> dict[str, Any]:
    prefix = f"{namespace}_" if namespace else ""
    output: dict[str, Any] = {}
    for name in DEFAULTS:
        key = prefix + name
        if key in mapping:
            output[name] = mapping[key]
    return output
