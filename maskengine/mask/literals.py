"""Literal projection at the value-storage boundary.

Engine operations always work on literal-free raw text. These helpers are used
only when a host stores its value with the mask literals embedded.
"""

from __future__ import annotations

from maskengine.mask.models import CompiledMask


def insert_literals_into_raw(mask: CompiledMask, raw: str | None) -> str:
    """Embed mask literals into ``raw``; ``"5551234567"`` becomes ``"(555) 123-4567"``.

    Literals are only emitted while raw input remains, so partial input stops at
    the first empty slot (``"555"`` becomes ``"(555"``).
    """

    text = raw or ""
    if mask.is_empty or not text:
        return text

    parts: list[str] = []
    raw_index = 0
    for token in mask.tokens:
        if token.is_literal:
            if raw_index < len(text):
                parts.append(token.character)
            continue
        if raw_index >= len(text):
            break
        parts.append(text[raw_index])
        raw_index += 1
    return "".join(parts)


def remove_literals_from_raw(mask: CompiledMask, value: str | None) -> str:
    """Strip the literals that ``insert_literals_into_raw`` placed into ``value``."""

    text = value or ""
    if mask.is_empty or not text:
        return text

    parts: list[str] = []
    char_index = 0
    for token in mask.tokens:
        if char_index >= len(text):
            break
        if token.is_literal:
            if text[char_index] == token.character:
                char_index += 1
            continue
        parts.append(text[char_index])
        char_index += 1
    return "".join(parts)
