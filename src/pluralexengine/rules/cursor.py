"""Immutable cursor and tokenizer for plural rule text.

Implements the immutable cursor pattern: every advance() returns a new
cursor, so a scanning loop cannot stall on a position it failed to move.
Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from pluralexengine.constants import RULE_VARIABLE
from pluralexengine.diagnostics import ErrorTemplate, GrammarError

__all__ = ["Cursor", "Token", "TokenKind", "tokenize"]

# Longest match first: "<=" must win over "<".
_OPERATOR_TOKENS: tuple[str, ...] = ("||", "&&", "==", "!=", "<=", ">=", "<", ">", "%")


class TokenKind(StrEnum):
    """Lexical category of a rule token."""

    NUMBER = "number"
    VARIABLE = "variable"
    OPERATOR = "operator"
    LPAREN = "("
    RPAREN = ")"
    QUESTION = "?"
    COLON = ":"
    EOF = "eof"


@dataclass(frozen=True, slots=True)
class Token:
    """A lexical token with its offset in the rule text."""

    kind: TokenKind
    text: str
    position: int


@dataclass(frozen=True, slots=True)
class Cursor:
    """Immutable source position tracker.

    Example:
        >>> cursor = Cursor("n%10", 0)
        >>> cursor.current
        'n'
        >>> cursor.advance().current
        '%'
        >>> Cursor("n", 1).is_eof
        True
    """

    source: str
    pos: int = 0

    @property
    def is_eof(self) -> bool:
        """Check if cursor is at end of input."""
        return self.pos >= len(self.source)

    @property
    def current(self) -> str:
        """Character at the cursor.

        Raises:
            EOFError: If the cursor is at end of input
        """
        if self.is_eof:
            msg = f"Cursor at EOF (position {self.pos})"
            raise EOFError(msg)
        return self.source[self.pos]

    def startswith(self, text: str) -> bool:
        """Check whether the remaining input starts with text."""
        return self.source.startswith(text, self.pos)

    def advance(self, count: int = 1) -> Cursor:
        """Return a new cursor moved forward, clamped at end of input."""
        return Cursor(self.source, min(self.pos + count, len(self.source)))

    def skip_whitespace(self) -> Cursor:
        """Return a new cursor past any whitespace."""
        pos = self.pos
        while pos < len(self.source) and self.source[pos].isspace():
            pos += 1
        return Cursor(self.source, pos)


def tokenize(rule: str) -> tuple[Token, ...]:
    """Split rule text into tokens, ending with an EOF token.

    The caller is expected to have checked the rule alphabet already, so
    the only failures here are characters that belong to the alphabet but
    form no operator on their own (a lone ``=``, ``&``, ``|`` or ``!``).

    Args:
        rule: Rule text

    Returns:
        Tokens in source order, terminated by TokenKind.EOF

    Raises:
        GrammarError: If an operator character does not form a valid operator
    """
    tokens: list[Token] = []
    cursor = Cursor(rule).skip_whitespace()

    while not cursor.is_eof:
        start = cursor.pos
        char = cursor.current

        if char.isdigit():
            end = cursor
            while not end.is_eof and end.current.isdigit():
                end = end.advance()
            tokens.append(Token(TokenKind.NUMBER, rule[start:end.pos], start))
            cursor = end
        elif char == RULE_VARIABLE:
            tokens.append(Token(TokenKind.VARIABLE, char, start))
            cursor = cursor.advance()
        elif char in "()?:":
            tokens.append(Token(TokenKind(char), char, start))
            cursor = cursor.advance()
        else:
            operator = next((op for op in _OPERATOR_TOKENS if cursor.startswith(op)), None)
            if operator is None:
                raise GrammarError(
                    ErrorTemplate.rule_syntax(rule, f"unexpected character {char!r}", start)
                )
            tokens.append(Token(TokenKind.OPERATOR, operator, start))
            cursor = cursor.advance(len(operator))

        cursor = cursor.skip_whitespace()

    tokens.append(Token(TokenKind.EOF, "", len(rule)))
    return tuple(tokens)
