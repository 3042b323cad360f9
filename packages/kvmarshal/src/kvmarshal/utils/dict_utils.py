# kvmarshal/utils/dict_utils.py

from typing import Any


def clean_kwargs(raw: dict[str, Any]) -> dict[str, Any]:
    """Return a shallow-cleaned kwargs dict.

    Drops only keys whose values are None. Falsy values like "" are kept so
    an explicitly empty option still reaches validation.
    """
    return {k: v for k, v in raw.items() if v is not None}
