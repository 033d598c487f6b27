from __future__ import annotations

from maskengine.mask.completeness import is_complete
from maskengine.mask.tokenizer import compile_mask

PHONE = compile_mask("(000) 000-0000")


def test_fully_filled_phone_is_complete() -> None:
    assert is_complete(PHONE, "5551234567")


def test_partial_or_empty_phone_is_incomplete() -> None:
    assert not is_complete(PHONE, "555")
    assert not is_complete(PHONE, "")
    assert not is_complete(PHONE, None)


def test_optional_only_mask_is_always_complete() -> None:
    assert is_complete(compile_mask("999"), "")


def test_mixed_required_and_optional() -> None:
    assert is_complete(compile_mask("00000-9999"), "12345")
    assert is_complete(compile_mask("00000-9999"), "123456789")


def test_invalid_char_in_required_slot_is_incomplete() -> None:
    assert not is_complete(compile_mask("000-00-0000"), "12345678a")


def test_required_slots_after_optional_slots_count_by_position() -> None:
    mask = compile_mask("99-00")

    assert not is_complete(mask, "12")
    assert is_complete(mask, "1234")


def test_empty_mask_requires_any_input() -> None:
    mask = compile_mask("")

    assert is_complete(mask, "hello")
    assert not is_complete(mask, "")


def test_appending_valid_chars_keeps_mask_complete() -> None:
    mask = compile_mask("00000-9999")
    raw = "12345"
    assert is_complete(mask, raw)

    for digit in "6789":
        raw += digit
        assert is_complete(mask, raw)
