"""Plural rule parser.

Parses one boolean or arithmetic expression of the plural-rule grammar
into an AST. Ternary chains are not expressions at this level: the
compiler peels them into (condition, index) rows first and hands each
condition to this parser separately.

Grammar (precedence low to high, all binary operators left-associative):

    expression := or
    or         := and ( "||" and )*
    and        := equality ( "&&" equality )*
    equality   := relation ( ( "==" | "!=" ) relation )*
    relation   := modulo ( ( "<" | "<=" | ">" | ">=" ) modulo )*
    modulo     := primary ( "%" primary )*
    primary    := INTEGER | "n" | "(" expression ")"

Equality binds looser than relational comparison, as in C, so rules copied
from gettext headers evaluate exactly as libintl evaluates them.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging

from pluralexengine.constants import MAX_DEPTH, MAX_RULE_LENGTH, RULE_ALPHABET
from pluralexengine.core.depth_guard import DepthGuard
from pluralexengine.diagnostics import ErrorTemplate, GrammarError, InvalidCharactersError
from pluralexengine.enums import BinaryOperator

from .ast import BinaryOp, Expression, Grouping, Literal, Variable
from .cursor import Token, TokenKind, tokenize

__all__ = ["RuleParser", "parse_rule", "validate_alphabet"]

logger = logging.getLogger(__name__)

_BINDING_POWER: dict[BinaryOperator, int] = {
    BinaryOperator.OR: 1,
    BinaryOperator.AND: 2,
    BinaryOperator.EQ: 3,
    BinaryOperator.NE: 3,
    BinaryOperator.LT: 4,
    BinaryOperator.LE: 4,
    BinaryOperator.GT: 4,
    BinaryOperator.GE: 4,
    BinaryOperator.MOD: 5,
}


def validate_alphabet(rule: str) -> None:
    """Reject rule text containing characters outside the rule alphabet.

    Whitespace is allowed anywhere. Runs before tokenization, so text
    that fails here never reaches the parser or the evaluator.

    Args:
        rule: Rule text to check

    Raises:
        InvalidCharactersError: If any character is outside the alphabet
    """
    invalid: dict[str, None] = {}
    first_position: int | None = None
    for position, char in enumerate(rule):
        if char in RULE_ALPHABET or char.isspace():
            continue
        if first_position is None:
            first_position = position
        invalid[char] = None

    if first_position is not None:
        raise InvalidCharactersError(
            ErrorTemplate.invalid_characters(rule, "".join(invalid), first_position)
        )


class _ParseState:
    """Token stream position for a single parse() call."""

    __slots__ = ("guard", "index", "rule", "tokens")

    def __init__(self, rule: str, tokens: tuple[Token, ...], guard: DepthGuard) -> None:
        self.rule = rule
        self.tokens = tokens
        self.index = 0
        self.guard = guard

    @property
    def peek(self) -> Token:
        return self.tokens[self.index]

    def advance(self) -> Token:
        token = self.tokens[self.index]
        if token.kind is not TokenKind.EOF:
            self.index += 1
        return token

    def error(self, detail: str, token: Token) -> GrammarError:
        return GrammarError(ErrorTemplate.rule_syntax(self.rule, detail, token.position))

    def parse_binary(self, min_power: int) -> Expression:
        """Precedence climbing over the binary operator table."""
        left = self.parse_primary()
        while self.peek.kind is TokenKind.OPERATOR:
            op = BinaryOperator(self.peek.text)
            power = _BINDING_POWER[op]
            if power <= min_power:
                break
            self.advance()
            right = self.parse_binary(power)
            left = BinaryOp(op=op, left=left, right=right)
        return left

    def parse_primary(self) -> Expression:
        token = self.advance()
        match token.kind:
            case TokenKind.NUMBER:
                return Literal(int(token.text))
            case TokenKind.VARIABLE:
                return Variable()
            case TokenKind.LPAREN:
                with self.guard:
                    inner = self.parse_binary(0)
                closing = self.advance()
                if closing.kind is not TokenKind.RPAREN:
                    raise self.error("expected ')'", closing)
                return Grouping(inner)
            case TokenKind.QUESTION | TokenKind.COLON:
                raise self.error(
                    f"ternary {token.text!r} is only allowed in a plural chain", token
                )
            case TokenKind.EOF:
                raise self.error("unexpected end of rule", token)
            case _:
                raise self.error(f"expected a number, 'n' or '(', found {token.text!r}", token)


class RuleParser:
    """Parser for single plural rule expressions.

    Stateless between calls and safe to share across threads. Every call
    to parse() allocates its own token stream and depth guard.

    Example:
        >>> parser = RuleParser()
        >>> parser.parse("n != 1")
        BinaryOp(op=<BinaryOperator.NE: '!='>, left=Variable(name='n'), right=Literal(value=1))
    """

    __slots__ = ("_max_depth", "_max_length")

    def __init__(self, *, max_length: int = MAX_RULE_LENGTH, max_depth: int = MAX_DEPTH) -> None:
        """Initialize parser.

        Args:
            max_length: Longest rule text accepted, in characters
            max_depth: Deepest parenthesis nesting accepted

        Raises:
            ValueError: If a limit is not positive
        """
        if max_length < 1 or max_depth < 1:
            msg = f"Parser limits must be positive, got max_length={max_length}, max_depth={max_depth}"
            raise ValueError(msg)
        self._max_length = max_length
        self._max_depth = max_depth

    @property
    def max_length(self) -> int:
        """Longest rule text accepted, in characters."""
        return self._max_length

    def parse(self, rule: str) -> Expression:
        """Parse rule text into an expression tree.

        Args:
            rule: Rule text such as ``n%10==1 && n%100!=11``

        Returns:
            Root expression node

        Raises:
            TypeError: If rule is not a string
            InvalidCharactersError: If rule contains characters outside the alphabet
            GrammarError: If rule is not exactly one well-formed expression
            DepthLimitExceededError: If parentheses nest too deeply
        """
        if not isinstance(rule, str):
            msg = f"Plural rule must be str, got {type(rule).__name__}"
            raise TypeError(msg)
        if len(rule) > self._max_length:
            raise GrammarError(ErrorTemplate.rule_too_long(len(rule), self._max_length))

        validate_alphabet(rule)
        tokens = tokenize(rule)
        if tokens[0].kind is TokenKind.EOF:
            raise GrammarError(ErrorTemplate.rule_syntax(rule, "empty rule", 0))

        state = _ParseState(rule, tokens, DepthGuard(max_depth=self._max_depth))
        expression = state.parse_binary(0)
        if state.peek.kind in (TokenKind.QUESTION, TokenKind.COLON):
            raise state.error(
                f"ternary {state.peek.text!r} is only allowed in a plural chain", state.peek
            )
        if state.peek.kind is not TokenKind.EOF:
            raise state.error(f"unexpected {state.peek.text!r} after expression", state.peek)

        logger.debug("Parsed plural rule %r", rule)
        return expression


_DEFAULT_PARSER = RuleParser()


def parse_rule(rule: str) -> Expression:
    """Parse rule text with the default limits.

    Args:
        rule: Rule text

    Returns:
        Root expression node

    Raises:
        InvalidCharactersError: If rule contains characters outside the alphabet
        GrammarError: If rule is not exactly one well-formed expression
    """
    return _DEFAULT_PARSER.parse(rule)
