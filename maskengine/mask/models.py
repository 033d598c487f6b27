"""Data models for mask tokens, compiled masks, and reconciler results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

DEFAULT_PROMPT_CHAR = "_"


class TokenKind(Enum):
    """Input class of one mask position."""

    LITERAL = "literal"
    REQUIRED_DIGIT = "required_digit"
    OPTIONAL_DIGIT = "optional_digit"
    REQUIRED_LETTER = "required_letter"
    OPTIONAL_LETTER = "optional_letter"
    REQUIRED_LETTER_UPPER = "required_letter_upper"
    OPTIONAL_LETTER_UPPER = "optional_letter_upper"
    REQUIRED_ANY = "required_any"
    OPTIONAL_ANY = "optional_any"


_OPTIONAL_KINDS = frozenset(
    {
        TokenKind.OPTIONAL_DIGIT,
        TokenKind.OPTIONAL_LETTER,
        TokenKind.OPTIONAL_LETTER_UPPER,
        TokenKind.OPTIONAL_ANY,
    }
)

DIGIT_KINDS = frozenset({TokenKind.REQUIRED_DIGIT, TokenKind.OPTIONAL_DIGIT})
LETTER_KINDS = frozenset({TokenKind.REQUIRED_LETTER, TokenKind.OPTIONAL_LETTER})
UPPER_LETTER_KINDS = frozenset(
    {TokenKind.REQUIRED_LETTER_UPPER, TokenKind.OPTIONAL_LETTER_UPPER}
)
ANY_KINDS = frozenset({TokenKind.REQUIRED_ANY, TokenKind.OPTIONAL_ANY})


@dataclass(frozen=True)
class MaskToken:
    """One parsed unit of a mask pattern.

    For literal tokens ``character`` is rendered verbatim. For placeholders it is
    the pattern symbol it was parsed from and carries no meaning beyond diagnostics.
    """

    kind: TokenKind
    character: str

    @property
    def is_literal(self) -> bool:
        return self.kind is TokenKind.LITERAL

    @property
    def is_optional(self) -> bool:
        return self.kind in _OPTIONAL_KINDS


@dataclass(frozen=True)
class CompiledMask:
    """Immutable compiled grammar shared by every field using one pattern."""

    pattern: str
    tokens: tuple[MaskToken, ...]
    prompt_char: str = DEFAULT_PROMPT_CHAR
    input_tokens: tuple[MaskToken, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Placeholder slots in mask order; raw index i fills input_tokens[i].
        slots = tuple(token for token in self.tokens if not token.is_literal)
        object.__setattr__(self, "input_tokens", slots)

    @property
    def is_empty(self) -> bool:
        return not self.tokens

    @property
    def capacity(self) -> int | None:
        """Number of placeholder slots, or ``None`` when the mask is empty."""

        if not self.tokens:
            return None
        return len(self.input_tokens)


class MobileRule(Enum):
    """Reconciler rule that produced a mobile input result."""

    ECHO = "echo"
    CLEAR = "clear"
    SINGLE_CHAR = "single_char"
    SINGLE_CHAR_REJECTED = "single_char_rejected"
    APPEND = "append"
    DELETE = "delete"
    ACCUMULATED = "accumulated"
    REPARSE = "reparse"
    NOOP = "noop"


@dataclass(frozen=True)
class MobileInputResult:
    """Raw text, display text and caret position after one IME notification."""

    raw_text: str
    display_text: str
    cursor_position: int
    rule: MobileRule
