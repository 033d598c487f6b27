"""Completeness check for raw input against required mask slots."""

from __future__ import annotations

from maskengine.mask.models import CompiledMask
from maskengine.mask.validator import validate_char


def is_complete(mask: CompiledMask, raw: str | None) -> bool:
    """Return True when every required slot holds a valid raw character.

    A required slot is matched by the raw character at the same slot index;
    optional slots and literals impose no constraint. The slot index counts
    optional slots too, not required slots only, matching how raw text fills
    slots. An empty mask is complete for any non-empty input.
    """

    text = raw or ""
    if mask.is_empty:
        return bool(text)

    for raw_index, token in enumerate(mask.input_tokens):
        if token.is_optional:
            continue
        if raw_index >= len(text):
            return False
        if validate_char(text[raw_index], token.kind) is None:
            return False
    return True
