"""Conversion between raw input and rendered display text.

Rules:
- Raw text never contains literals or prompt characters.
- ``format_raw`` and ``extract_raw_text`` are inverse for raw text that fits the
  mask and holds only characters accepted by their slots.
- Empty masks pass text through unchanged in both directions.
"""

from __future__ import annotations

from maskengine.mask.models import CompiledMask
from maskengine.mask.validator import validate_char


def format_raw(mask: CompiledMask, raw: str | None, show_optional_prompts: bool) -> str:
    """Render ``raw`` through the mask into display text."""

    text = raw or ""
    if mask.is_empty or not text:
        return text
    return _render(mask, text, show_optional_prompts=show_optional_prompts, stop_at_unfilled=False)


def masked_text(mask: CompiledMask, raw: str | None, focused: bool) -> str:
    """Render the text a host should show for the given focus state.

    Focused fields show every unfilled slot as a prompt. Unfocused fields stop at
    the first unfilled slot, so ``"555"`` in ``"(000) 000-0000"`` shows ``"(555) "``.
    """

    text = raw or ""
    if mask.is_empty:
        return text
    if not text:
        if not focused:
            return ""
        return _render(mask, "", show_optional_prompts=True, stop_at_unfilled=False)
    if focused:
        return _render(mask, text, show_optional_prompts=True, stop_at_unfilled=False)
    return _render(mask, text, show_optional_prompts=False, stop_at_unfilled=True)


def extract_raw_text(mask: CompiledMask, display: str | None) -> str:
    """Extract literal-free raw input from display or free-form pasted text."""

    text = display or ""
    if mask.is_empty or not text:
        return text

    tokens = mask.tokens
    capacity = mask.capacity or 0
    chars: list[str] = []
    token_index = 0

    for char in text:
        if char == mask.prompt_char:
            continue

        consumed_by_literal = False
        while token_index < len(tokens) and tokens[token_index].is_literal:
            matched = char == tokens[token_index].character
            token_index += 1
            if matched:
                consumed_by_literal = True
                break

        if not consumed_by_literal:
            if token_index >= len(tokens):
                break
            normalized = validate_char(char, tokens[token_index].kind)
            if normalized is not None:
                chars.append(normalized)
                token_index += 1

        if len(chars) >= capacity:
            break

    return trim_to_capacity(mask, "".join(chars))


def trim_to_capacity(mask: CompiledMask, raw: str) -> str:
    """Cut ``raw`` to the number of placeholder slots in the mask."""

    capacity = mask.capacity
    if capacity is None or len(raw) <= capacity:
        return raw
    return raw[:capacity]


def _render(
    mask: CompiledMask,
    raw: str,
    *,
    show_optional_prompts: bool,
    stop_at_unfilled: bool,
) -> str:
    parts: list[str] = []
    raw_index = 0

    for token in mask.tokens:
        if token.is_literal:
            parts.append(token.character)
            continue

        if raw_index < len(raw):
            normalized = validate_char(raw[raw_index], token.kind)
            if normalized is not None:
                parts.append(normalized)
                raw_index += 1
            elif token.is_optional:
                parts.append(mask.prompt_char)
            else:
                # Required slot mismatch: drop the raw character and leave the slot out.
                raw_index += 1
            continue

        if stop_at_unfilled:
            break
        if not token.is_optional or show_optional_prompts:
            parts.append(mask.prompt_char)

    return "".join(parts)
