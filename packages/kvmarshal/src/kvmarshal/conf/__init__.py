from .defaults import DEFAULTS
from .models import DecoderConfig
from .settings import SETTINGS_MODULE_ENVVAR, Settings

__all__ = ["DEFAULTS", "DecoderConfig", "SETTINGS_MODULE_ENVVAR", "Settings"]
