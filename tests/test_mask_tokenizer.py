from __future__ import annotations

from dataclasses import replace

from maskengine.mask.models import TokenKind
from maskengine.mask.tokenizer import compile_mask, parse_mask


def test_parse_phone_mask_produces_literals_and_digits() -> None:
    tokens = parse_mask("(000) 000-0000")

    assert len(tokens) == 14
    assert tokens[0].kind is TokenKind.LITERAL
    assert tokens[0].character == "("
    assert tokens[1].kind is TokenKind.REQUIRED_DIGIT
    assert tokens[4].kind is TokenKind.LITERAL
    assert tokens[5].kind is TokenKind.LITERAL
    assert tokens[9].kind is TokenKind.LITERAL


def test_parse_zip_mask_has_optional_digits() -> None:
    tokens = parse_mask("00000-9999")

    assert len(tokens) == 10
    assert tokens[5].character == "-"
    assert tokens[6].kind is TokenKind.OPTIONAL_DIGIT
    assert tokens[6].is_optional
    assert not tokens[0].is_optional


def test_parse_every_placeholder_symbol() -> None:
    kinds = [token.kind for token in parse_mask("09Aa L?&C")]

    assert kinds == [
        TokenKind.REQUIRED_DIGIT,
        TokenKind.OPTIONAL_DIGIT,
        TokenKind.REQUIRED_LETTER,
        TokenKind.OPTIONAL_LETTER,
        TokenKind.LITERAL,
        TokenKind.REQUIRED_LETTER_UPPER,
        TokenKind.OPTIONAL_LETTER_UPPER,
        TokenKind.REQUIRED_ANY,
        TokenKind.OPTIONAL_ANY,
    ]


def test_escape_turns_placeholder_symbol_into_literal() -> None:
    tokens = parse_mask("\\0aaa")

    assert len(tokens) == 4
    assert tokens[0].kind is TokenKind.LITERAL
    assert tokens[0].character == "0"
    assert tokens[1].kind is TokenKind.OPTIONAL_LETTER


def test_trailing_backslash_is_literal() -> None:
    tokens = parse_mask("00\\")

    assert len(tokens) == 3
    assert tokens[2].kind is TokenKind.LITERAL
    assert tokens[2].character == "\\"


def test_empty_or_missing_pattern_yields_no_tokens() -> None:
    assert parse_mask("") == ()
    assert parse_mask(None) == ()


def test_compile_mask_reports_capacity() -> None:
    assert compile_mask("(000) 000-0000").capacity == 10
    assert compile_mask("000-00-0000").capacity == 9
    assert compile_mask("").capacity is None
    assert compile_mask(None).is_empty


def test_compile_mask_keeps_prompt_char() -> None:
    mask = compile_mask("00", prompt_char="#")

    assert mask.prompt_char == "#"
    assert mask.pattern == "00"


def test_compiled_mask_lists_placeholder_slots_in_order() -> None:
    mask = compile_mask("A0-9")

    assert [token.character for token in mask.input_tokens] == ["A", "0", "9"]
    assert mask.capacity == 3


def test_changing_prompt_char_keeps_slots_and_equality_by_pattern() -> None:
    mask = compile_mask("(000) 000-0000")

    rebound = replace(mask, prompt_char="#")

    assert rebound.input_tokens == mask.input_tokens
    assert rebound.prompt_char == "#"
    assert replace(rebound, prompt_char="_") == mask
