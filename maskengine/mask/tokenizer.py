"""Mask pattern tokenizer.

Rules:
- ``\\x`` always yields a literal ``x`` and consumes two pattern characters.
- A trailing lone backslash is kept as a literal backslash.
- Recognized placeholder symbols map to fixed token kinds.
- Every other character is a literal, so parsing never fails.
"""

from __future__ import annotations

from maskengine.mask.models import DEFAULT_PROMPT_CHAR, CompiledMask, MaskToken, TokenKind

_ESCAPE = "\\"

PLACEHOLDER_SYMBOLS: dict[str, TokenKind] = {
    "0": TokenKind.REQUIRED_DIGIT,
    "9": TokenKind.OPTIONAL_DIGIT,
    "A": TokenKind.REQUIRED_LETTER,
    "a": TokenKind.OPTIONAL_LETTER,
    "L": TokenKind.REQUIRED_LETTER_UPPER,
    "?": TokenKind.OPTIONAL_LETTER_UPPER,
    "&": TokenKind.REQUIRED_ANY,
    "C": TokenKind.OPTIONAL_ANY,
}


def parse_mask(pattern: str | None) -> tuple[MaskToken, ...]:
    """Compile ``pattern`` into an ordered tuple of tokens."""

    if not pattern:
        return ()

    tokens: list[MaskToken] = []
    index = 0
    while index < len(pattern):
        char = pattern[index]
        if char == _ESCAPE and index + 1 < len(pattern):
            tokens.append(MaskToken(TokenKind.LITERAL, pattern[index + 1]))
            index += 2
            continue

        kind = PLACEHOLDER_SYMBOLS.get(char, TokenKind.LITERAL)
        tokens.append(MaskToken(kind, char))
        index += 1

    return tuple(tokens)


def compile_mask(pattern: str | None, prompt_char: str = DEFAULT_PROMPT_CHAR) -> CompiledMask:
    """Parse ``pattern`` and bind it to a prompt character."""

    return CompiledMask(pattern=pattern or "", tokens=parse_mask(pattern), prompt_char=prompt_char)
