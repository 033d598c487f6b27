"""Built-in mask presets and keyboard hints."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Literal

from maskengine.mask.models import DIGIT_KINDS, CompiledMask

KeyboardHint = Literal["numeric", "default"]

PRESET_PREFIX = "preset:"

MASK_PRESETS: Mapping[str, str] = MappingProxyType(
    {
        "phone_us": "(000) 000-0000",
        "phone_intl": "+00 000 000 0000",
        "credit_card": "0000 0000 0000 0000",
        "date_us": "00/00/0000",
        "date_iso": "0000-00-00",
        "time_hhmm": "00:00",
        "time_hhmmss": "00:00:00",
        "ssn": "000-00-0000",
        "zip_us": "00000-9999",
        "zip_ca": "A0A 0A0",
    }
)


def list_presets() -> list[str]:
    """Return preset names in stable order."""

    return sorted(MASK_PRESETS)


def resolve_pattern(value: str) -> str:
    """Expand a ``preset:<name>`` reference; other values are returned as patterns."""

    if not value.startswith(PRESET_PREFIX):
        return value
    name = value[len(PRESET_PREFIX) :].strip()
    try:
        return MASK_PRESETS[name]
    except KeyError as exc:
        raise ValueError(f"Unknown mask preset: {name}") from exc


def keyboard_hint(mask: CompiledMask) -> KeyboardHint:
    """Suggest a numeric keyboard when every slot only accepts digits."""

    input_tokens = mask.input_tokens
    if not input_tokens:
        return "default"
    if all(token.kind in DIGIT_KINDS for token in input_tokens):
        return "numeric"
    return "default"
