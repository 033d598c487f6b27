"""Single-character validation and normalization against token kinds."""

from __future__ import annotations

from maskengine.mask.models import (
    ANY_KINDS,
    DIGIT_KINDS,
    LETTER_KINDS,
    UPPER_LETTER_KINDS,
    CompiledMask,
    MaskToken,
    TokenKind,
)


def validate_char(char: str, kind: TokenKind) -> str | None:
    """Return the accepted (possibly upper-cased) character, or ``None`` if rejected."""

    if len(char) != 1:
        return None
    if kind in DIGIT_KINDS:
        return char if char.isdigit() else None
    if kind in LETTER_KINDS:
        return char if char.isalpha() else None
    if kind in UPPER_LETTER_KINDS:
        if not char.isalpha():
            return None
        upper = char.upper()
        # Some letters expand when upper-cased (e.g. "ß" -> "SS"); keep one char per slot.
        return upper if len(upper) == 1 else char
    if kind in ANY_KINDS:
        return char
    return None


def input_token_at(mask: CompiledMask, raw_index: int) -> MaskToken | None:
    """Return the placeholder token filled by the ``raw_index``-th raw character."""

    slots = mask.input_tokens
    if 0 <= raw_index < len(slots):
        return slots[raw_index]
    return None


def normalize_for_raw_index(mask: CompiledMask, char: str, raw_index: int) -> str | None:
    """Validate ``char`` for the slot at ``raw_index``; empty masks accept anything."""

    if mask.is_empty:
        return char
    token = input_token_at(mask, raw_index)
    if token is None:
        return None
    return validate_char(char, token.kind)
