from __future__ import annotations

import pytest

from maskengine.mask.presets import MASK_PRESETS, keyboard_hint, list_presets, resolve_pattern
from maskengine.mask.tokenizer import compile_mask


def test_list_presets_is_sorted_and_complete() -> None:
    names = list_presets()

    assert names == sorted(names)
    assert set(names) == set(MASK_PRESETS)
    assert "phone_us" in names
    assert "zip_ca" in names


def test_resolve_pattern_expands_presets() -> None:
    assert resolve_pattern("preset:phone_us") == "(000) 000-0000"
    assert resolve_pattern("preset:ssn") == "000-00-0000"


def test_resolve_pattern_returns_plain_patterns_unchanged() -> None:
    assert resolve_pattern("LLL-0000") == "LLL-0000"
    assert resolve_pattern("") == ""


def test_resolve_pattern_unknown_preset_raises() -> None:
    with pytest.raises(ValueError, match="Unknown mask preset: nope"):
        resolve_pattern("preset:nope")


def test_presets_cannot_be_mutated() -> None:
    with pytest.raises(TypeError):
        MASK_PRESETS["custom"] = "000"  # type: ignore[index]


@pytest.mark.parametrize(
    ("pattern", "hint"),
    [
        ("(000) 000-0000", "numeric"),
        ("00000-9999", "numeric"),
        ("A0A 0A0", "default"),
        ("LLL-0000", "default"),
        ("", "default"),
        ("---", "default"),
    ],
)
def test_keyboard_hint(pattern: str, hint: str) -> None:
    assert keyboard_hint(compile_mask(pattern)) == hint
