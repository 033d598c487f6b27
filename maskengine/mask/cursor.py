"""Caret mapping from raw-text offsets to display-text offsets."""

from __future__ import annotations

from maskengine.mask.models import CompiledMask


def display_cursor_for_raw_length(mask: CompiledMask, raw_length: int, display: str) -> int:
    """Return the display index right after ``raw_length`` filled slots.

    The caret lands on the next placeholder position, so literals between slots
    are skipped over. Falls back to the end of ``display``.
    """

    if mask.is_empty:
        return min(max(raw_length, 0), len(display))

    target = max(0, raw_length)
    raw_index = 0
    limit = min(len(mask.tokens), len(display))
    for display_index in range(limit):
        if mask.tokens[display_index].is_literal:
            continue
        if raw_index == target:
            return display_index
        raw_index += 1

    return len(display)
