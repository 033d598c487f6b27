"""Per-field state and the host-facing contract for masked text fields.

The compiled mask is immutable and may be shared across fields. Everything a
host must retain between events lives in ``FieldState``; every operation
returns a new state instead of mutating the old one.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from maskengine.mask.completeness import is_complete
from maskengine.mask.converter import extract_raw_text, masked_text, trim_to_capacity
from maskengine.mask.cursor import display_cursor_for_raw_length
from maskengine.mask.literals import insert_literals_into_raw, remove_literals_from_raw
from maskengine.mask.mobile import process_mobile_input
from maskengine.mask.models import DEFAULT_PROMPT_CHAR, CompiledMask, MobileRule
from maskengine.mask.tokenizer import compile_mask

DEFAULT_REQUIRED_MESSAGE = "This field is required."
INCOMPLETE_MESSAGE = "Please complete the required format."


@dataclass(frozen=True)
class FieldState:
    """Everything one masked field needs between input events."""

    mask: CompiledMask
    raw_text: str = ""
    expected_display: str = ""
    focused: bool = False
    include_literals: bool = False


@dataclass(frozen=True)
class EditResult:
    """Outcome of one desktop or mobile edit.

    ``changed`` is False when the edit was silently rejected.
    """

    state: FieldState
    changed: bool
    cursor_position: int
    rule: MobileRule | None = None


@dataclass(frozen=True)
class FieldValidation:
    """Validation outcome for a field value."""

    is_valid: bool
    errors: tuple[str, ...] = ()


def new_field(
    pattern: str | None = "",
    prompt_char: str = DEFAULT_PROMPT_CHAR,
    include_literals: bool = False,
    focused: bool = False,
) -> FieldState:
    """Create an empty field for ``pattern``."""

    _check_prompt_char(prompt_char)
    state = FieldState(
        mask=compile_mask(pattern, prompt_char),
        include_literals=include_literals,
        focused=focused,
    )
    return _refresh(state)


def set_mask(state: FieldState, pattern: str | None) -> FieldState:
    """Swap the mask; raw text is kept but cut to the new capacity."""

    mask = compile_mask(pattern, state.mask.prompt_char)
    raw = trim_to_capacity(mask, state.raw_text)
    return _refresh(replace(state, mask=mask, raw_text=raw))


def set_prompt_char(state: FieldState, prompt_char: str) -> FieldState:
    _check_prompt_char(prompt_char)
    mask = replace(state.mask, prompt_char=prompt_char)
    return _refresh(replace(state, mask=mask))


def set_include_literals(state: FieldState, include_literals: bool) -> FieldState:
    return replace(state, include_literals=include_literals)


def set_focused(state: FieldState, focused: bool) -> FieldState:
    """Apply a focus change; prompts are only shown while focused."""

    return _refresh(replace(state, focused=focused))


def clear(state: FieldState) -> FieldState:
    return _refresh(replace(state, raw_text=""))


def apply_desktop_text(state: FieldState, text: str | None) -> EditResult:
    """Handle a keystroke-driven text change reported by a desktop text box."""

    raw = extract_raw_text(state.mask, text)
    display = masked_text(state.mask, raw, state.focused)
    cursor = display_cursor_for_raw_length(state.mask, len(raw), display)
    updated = replace(state, raw_text=raw, expected_display=display)
    return EditResult(state=updated, changed=raw != state.raw_text, cursor_position=cursor)


def apply_mobile_change(
    state: FieldState, old_display: str | None, new_display: str | None
) -> EditResult:
    """Handle one native text-change notification from a mobile IME."""

    result = process_mobile_input(
        state.mask,
        old_display,
        new_display,
        state.expected_display,
        state.raw_text,
        show_optional_prompts=state.focused,
    )
    display = result.display_text
    cursor = result.cursor_position
    if not state.focused and result.raw_text:
        # Unfocused fields render like every other host path: cut at the first empty slot.
        display = masked_text(state.mask, result.raw_text, False)
        cursor = display_cursor_for_raw_length(state.mask, len(result.raw_text), display)
    updated = replace(state, raw_text=result.raw_text, expected_display=display)
    return EditResult(
        state=updated,
        changed=result.raw_text != state.raw_text,
        cursor_position=cursor,
        rule=result.rule,
    )


def is_mask_complete(state: FieldState) -> bool:
    return is_complete(state.mask, state.raw_text)


def get_masked_text(state: FieldState, focused: bool | None = None) -> str:
    """Render the field; ``focused`` defaults to the field's own focus state."""

    effective_focus = state.focused if focused is None else focused
    return masked_text(state.mask, state.raw_text, effective_focus)


def max_raw_length(state: FieldState) -> int | None:
    """Mask capacity, or ``None`` when the mask is empty and input is unbounded."""

    return state.mask.capacity


def cursor_for(state: FieldState, raw_length: int) -> int:
    return display_cursor_for_raw_length(state.mask, raw_length, get_masked_text(state))


def get_value(state: FieldState) -> str:
    """Return the externally stored value, with literals when enabled."""

    if state.include_literals:
        return insert_literals_into_raw(state.mask, state.raw_text)
    return state.raw_text


def set_value(state: FieldState, value: str | None) -> FieldState:
    """Load an externally stored value into the field."""

    text = value or ""
    if state.include_literals:
        text = remove_literals_from_raw(state.mask, text)
    return _refresh(replace(state, raw_text=trim_to_capacity(state.mask, text)))


def validate_field(
    state: FieldState,
    *,
    required: bool = False,
    required_message: str = DEFAULT_REQUIRED_MESSAGE,
) -> FieldValidation:
    """Check the required flag and that a non-empty value fills the mask."""

    if required and not state.raw_text:
        return FieldValidation(is_valid=False, errors=(required_message,))
    if state.raw_text and not is_mask_complete(state):
        return FieldValidation(is_valid=False, errors=(INCOMPLETE_MESSAGE,))
    return FieldValidation(is_valid=True)


def _refresh(state: FieldState) -> FieldState:
    display = masked_text(state.mask, state.raw_text, state.focused)
    return replace(state, expected_display=display)


def _check_prompt_char(prompt_char: str) -> None:
    if len(prompt_char) != 1:
        raise ValueError(f"Prompt character must be a single character, got {prompt_char!r}")
