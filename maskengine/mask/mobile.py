"""Reconcile mobile IME text-change notifications into raw-text edits.

Mobile input method editors report edits in several non-linear shapes: the full
re-rendered field, only the newly typed character, the accumulated unformatted
input, or an echo of what the engine itself just wrote. The rules below run in a
fixed order, from least to most ambiguous, and the first match wins:

1. echo        - the box shows exactly what the engine last wrote
2. clear       - the box is empty
3. single char - the box holds one character after a full rendering
4. append      - re-parsed raw text extends the current raw text
5. delete      - re-parsed raw text is a prefix of the current raw text
6. accumulated - the box holds raw input validated slot by slot from index 0
7. reparse     - any non-empty re-parsed raw text
8. no-op       - keep the current state

Every path returns a result; nothing here raises.
"""

from __future__ import annotations

from maskengine.mask.converter import extract_raw_text, format_raw, trim_to_capacity
from maskengine.mask.cursor import display_cursor_for_raw_length
from maskengine.mask.models import CompiledMask, MobileInputResult, MobileRule
from maskengine.mask.validator import normalize_for_raw_index, validate_char


def process_mobile_input(
    mask: CompiledMask,
    old_display: str | None,
    new_display: str | None,
    expected_display: str | None,
    current_raw: str | None,
    show_optional_prompts: bool = True,
) -> MobileInputResult:
    """Infer the raw-text edit that explains a change from ``old_display`` to ``new_display``."""

    old_text = old_display or ""
    new_text = new_display or ""
    expected = expected_display or ""
    raw = current_raw or ""

    if new_text == expected:
        return _keep(mask, raw, expected, MobileRule.ECHO)

    if not new_text:
        return MobileInputResult("", "", 0, MobileRule.CLEAR)

    capacity = mask.capacity

    if len(new_text) == 1 and len(old_text) > 1 and old_text == expected:
        has_room = capacity is None or len(raw) < capacity
        normalized = normalize_for_raw_index(mask, new_text, len(raw)) if has_room else None
        if normalized is None:
            return _keep(mask, raw, expected, MobileRule.SINGLE_CHAR_REJECTED)
        appended = trim_to_capacity(mask, raw + normalized)
        return _build(mask, appended, show_optional_prompts, MobileRule.SINGLE_CHAR)

    candidate = trim_to_capacity(mask, extract_raw_text(mask, new_text))

    if len(candidate) > len(raw) and candidate.startswith(raw):
        return _build(mask, candidate, show_optional_prompts, MobileRule.APPEND)

    if len(candidate) < len(raw) and raw.startswith(candidate):
        return _build(mask, candidate, show_optional_prompts, MobileRule.DELETE)

    accumulated = accumulated_raw(mask, new_text)
    if accumulated is not None and len(accumulated) >= len(raw):
        return _build(mask, accumulated, show_optional_prompts, MobileRule.ACCUMULATED)

    if candidate:
        return _build(mask, candidate, show_optional_prompts, MobileRule.REPARSE)

    return _keep(mask, raw, expected, MobileRule.NOOP)


def accumulated_raw(mask: CompiledMask, text: str) -> str | None:
    """Read ``text`` as unformatted input, validating each char at its own slot.

    Returns ``None`` unless every character validates and the text fits the mask.
    """

    if not text:
        return None
    if mask.is_empty:
        return text
    if len(text) > len(mask.input_tokens):
        return None

    chars: list[str] = []
    for char, token in zip(text, mask.input_tokens):
        normalized = validate_char(char, token.kind)
        if normalized is None:
            return None
        chars.append(normalized)
    return "".join(chars)


def _build(
    mask: CompiledMask, raw: str, show_optional_prompts: bool, rule: MobileRule
) -> MobileInputResult:
    display = format_raw(mask, raw, show_optional_prompts) if raw else ""
    return _keep(mask, raw, display, rule)


def _keep(mask: CompiledMask, raw: str, display: str, rule: MobileRule) -> MobileInputResult:
    cursor = display_cursor_for_raw_length(mask, len(raw), display) if raw else 0
    return MobileInputResult(raw, display, cursor, rule)
