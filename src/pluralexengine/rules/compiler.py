"""Plural rule compiler.

Turns catalog header fields into a PluralTable: an ordered tuple of
(predicate, form index) rows plus a fallback index. Two header styles
are supported:

Direct:
    {"nplurals": "2", "plural": "n != 1"}

    A single boolean test selects form 1 when true and form 0 otherwise.
    An expression that is itself a ternary chain is compiled like a
    chained rule and must declare exactly nplurals forms.

Chained:
    {"plural-forms": "nplurals=3; plural=n==1 ? 0 : n%10>=2 && n%10<=4 ? 1 : 2;"}

    The right-associated ternary chain is peeled from the left into rows.
    Rules declaring two forms skip the decision-count check, accepting the
    historical gettext habit of writing a bare boolean test for them.

Every compiled table is checked for literal ``% 0`` and evaluated once at
n=1 before it is returned, so rule faults surface when the catalog loads
rather than in the middle of a lookup.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from pluralexengine.constants import DEFAULT_NPLURALS, DEFAULT_PLURAL_RULE, NPLURALS_RELAXED_COUNT
from pluralexengine.diagnostics import (
    ErrorTemplate,
    GrammarError,
    MissingNPluralsError,
    MissingPluralExpressionError,
    NPluralsMismatchError,
    RuleEvaluationError,
)
from pluralexengine.enums import BinaryOperator, PluralRuleSyntax

from .ast import BinaryOp, Expression, Grouping, Literal, is_boolean_expression
from .evaluator import evaluate
from .parser import RuleParser, validate_alphabet
from .serializer import serialize_table

__all__ = ["PluralTable", "PluralTest", "RuleCompiler"]

logger = logging.getLogger(__name__)

_NPLURALS_PATTERN = re.compile(r"\s*nplurals\s*=\s*(\d+)", re.IGNORECASE)
_PLURAL_PATTERN = re.compile(r"\bplural\s*=(.*)\Z", re.IGNORECASE | re.DOTALL)


@dataclass(frozen=True, slots=True)
class PluralTest:
    """One row of a plural table: if predicate(n) holds, use variant_index."""

    predicate: Expression
    variant_index: int


@dataclass(frozen=True, slots=True)
class PluralTable:
    """Compiled plural rule.

    Rows are tried in order; the first predicate that holds selects its
    form. When none holds, fallback_index is used. Tables declaring fewer
    than two forms are degenerate: they have no rows and always select
    form 0.

    Immutable and shared read-only between threads.

    Attributes:
        nplurals: Number of grammatical forms the catalog provides
        tests: Decision rows in evaluation order
        fallback_index: Form used when no row matches
        syntax: Header style the table was compiled from (not compared)
        source: Original rule text (not compared)
    """

    nplurals: int
    tests: tuple[PluralTest, ...] = ()
    fallback_index: int = 0
    syntax: PluralRuleSyntax | None = field(default=None, compare=False)
    source: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        """Validate table shape.

        Raises:
            ValueError: If nplurals is negative, or a degenerate table has rows
            NPluralsMismatchError: If a row or the fallback selects a form
                outside [0, nplurals)
        """
        if self.nplurals < 0:
            msg = f"PluralTable.nplurals must be >= 0, got {self.nplurals}"
            raise ValueError(msg)
        if self.is_degenerate:
            if self.tests or self.fallback_index != 0:
                msg = f"A table with nplurals={self.nplurals} cannot have decision rows"
                raise ValueError(msg)
            return
        for index in (*(test.variant_index for test in self.tests), self.fallback_index):
            if not 0 <= index < self.nplurals:
                raise NPluralsMismatchError(
                    ErrorTemplate.variant_index_out_of_range(index, self.nplurals)
                )

    @property
    def is_degenerate(self) -> bool:
        """True when every quantity selects form 0."""
        return self.nplurals <= 1

    def select(self, n: int) -> int:
        """Return the form index for quantity n.

        Raises:
            TypeError: If n is not an int
            RuleEvaluationError: If a row computes a remainder by zero
        """
        for test in self.tests:
            if evaluate(test.predicate, n):
                return test.variant_index
        return self.fallback_index

    def to_plural_forms(self) -> str:
        """Render as a chained header value that compiles to an equal table."""
        return serialize_table(self)


class RuleCompiler:
    """Compiler from catalog header fields to PluralTable.

    Stateless apart from its parser and safe to share across threads.

    Example:
        >>> compiler = RuleCompiler()
        >>> table = compiler.compile_chained("nplurals=2; plural=(n > 1);")
        >>> table.select(1), table.select(5)
        (0, 1)
    """

    __slots__ = ("_parser",)

    def __init__(self, parser: RuleParser | None = None) -> None:
        """Initialize compiler.

        Args:
            parser: Parser used for every condition (default: RuleParser())
        """
        self._parser = parser if parser is not None else RuleParser()

    @property
    def parser(self) -> RuleParser:
        """Parser used for every condition."""
        return self._parser

    def compile_direct(self, nplurals: object, plural: object) -> PluralTable:
        """Compile separate ``nplurals`` and ``plural`` header fields.

        Args:
            nplurals: Number of forms, as int or digit string
            plural: Rule expression, may be None when nplurals < 2

        Returns:
            Validated plural table

        Raises:
            MissingNPluralsError: If nplurals is absent or not a non-negative integer
            MissingPluralExpressionError: If nplurals >= 2 and plural is blank
            InvalidCharactersError: If plural contains characters outside the alphabet
            GrammarError: If plural is malformed or faults at n=1
            NPluralsMismatchError: If a ternary plural selects the wrong number of forms
        """
        count = _coerce_nplurals(nplurals)
        rule = self._rule_text(plural)

        if not rule:
            if count >= 2:
                raise MissingPluralExpressionError(ErrorTemplate.missing_plural_expression(count))
            return PluralTable(count, syntax=PluralRuleSyntax.DIRECT)

        self._prepare(rule)
        if "?" in rule:
            tests, fallback = self._peel(rule)
            if len(tests) + 1 != count:
                raise NPluralsMismatchError(ErrorTemplate.nplurals_mismatch(count, len(tests), rule))
        else:
            tests, fallback = self._single_test(rule), 0

        if count < 2:
            # Nothing to select between, but a broken rule is still an error.
            self._verify(tests, rule)
            return PluralTable(count, syntax=PluralRuleSyntax.DIRECT, source=rule)

        table = PluralTable(count, tests, fallback, syntax=PluralRuleSyntax.DIRECT, source=rule)
        return self._finish(table)

    def compile_chained(self, plural_forms: object) -> PluralTable:
        """Compile a gettext ``nplurals=K; plural=<chain>;`` header value.

        Args:
            plural_forms: The header value

        Returns:
            Validated plural table

        Raises:
            MissingNPluralsError: If the nplurals field is absent or not numeric
            MissingPluralExpressionError: If K >= 2 and the plural field is blank
            InvalidCharactersError: If the chain contains characters outside the alphabet
            GrammarError: If a condition or index is malformed or faults at n=1
            NPluralsMismatchError: If K > 2 and the chain does not select K forms
        """
        if not isinstance(plural_forms, str):
            raise MissingNPluralsError(ErrorTemplate.missing_nplurals(plural_forms))
        header_match = _NPLURALS_PATTERN.match(plural_forms)
        if header_match is None:
            raise MissingNPluralsError(ErrorTemplate.missing_nplurals(plural_forms))

        count = int(header_match.group(1))
        if count < 2:
            return PluralTable(count, syntax=PluralRuleSyntax.CHAINED, source=plural_forms)

        plural_match = _PLURAL_PATTERN.search(plural_forms, header_match.end())
        chain = plural_match.group(1).strip() if plural_match else ""
        chain = chain.removesuffix(";").rstrip()
        if not chain:
            raise MissingPluralExpressionError(ErrorTemplate.missing_plural_expression(count))

        self._prepare(chain)
        if "?" in chain:
            tests, fallback = self._peel(chain)
            if count > NPLURALS_RELAXED_COUNT and len(tests) + 1 != count:
                raise NPluralsMismatchError(ErrorTemplate.nplurals_mismatch(count, len(tests), chain))
        else:
            tests, fallback = self._single_test(chain), 0

        table = PluralTable(count, tests, fallback, syntax=PluralRuleSyntax.CHAINED, source=plural_forms)
        return self._finish(table)

    def compile_header(self, header: Mapping[str, object], syntax: PluralRuleSyntax) -> PluralTable:
        """Compile the plural fields of a catalog header.

        Field names are matched case-insensitively, so a header copied
        from a PO file (``Plural-Forms``) works in chained mode.

        Args:
            header: Header mapping of a document catalog
            syntax: Which header style to read

        Returns:
            Validated plural table
        """
        match syntax:
            case PluralRuleSyntax.DIRECT:
                return self.compile_direct(
                    _header_field(header, "nplurals"), _header_field(header, "plural")
                )
            case PluralRuleSyntax.CHAINED:
                return self.compile_chained(_header_field(header, "plural-forms"))

    def compile_default(self, rule: str = DEFAULT_PLURAL_RULE) -> PluralTable:
        """Compile the two-way fallback rule used when no catalog rule applies.

        Args:
            rule: Expression that is true when the plural key should be used

        Returns:
            Validated two-form table
        """
        return self.compile_direct(DEFAULT_NPLURALS, rule)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _rule_text(self, plural: object) -> str:
        if plural is None:
            return ""
        if not isinstance(plural, str):
            raise GrammarError(ErrorTemplate.rule_syntax(repr(plural), "rule must be text"))
        return plural.strip()

    def _prepare(self, rule: str) -> None:
        if len(rule) > self._parser.max_length:
            raise GrammarError(ErrorTemplate.rule_too_long(len(rule), self._parser.max_length))
        validate_alphabet(rule)

    def _single_test(self, rule: str) -> tuple[PluralTest, ...]:
        predicate = self._parser.parse(rule)
        if not is_boolean_expression(predicate):
            logger.debug("Plural rule %r is arithmetic; any non-zero value selects form 1", rule)
        return (PluralTest(_unwrap(predicate), 1),)

    def _peel(self, chain: str) -> tuple[tuple[PluralTest, ...], int]:
        """Peel ``cond ? idx : rest`` segments from the left of a chain."""
        tests: list[PluralTest] = []
        remainder = chain
        while (segment := _split_ternary(remainder, chain)) is not None:
            condition, index_text, remainder = segment
            predicate = self._parser.parse(_enclose(condition))
            tests.append(PluralTest(_unwrap(predicate), _parse_index(index_text, chain)))
        return tuple(tests), _parse_index(remainder, chain)

    def _verify(self, tests: tuple[PluralTest, ...], rule: str) -> None:
        for test in tests:
            _reject_literal_zero_divisor(test.predicate, rule)
        for test in tests:
            try:
                evaluate(test.predicate, 1)
            except RuleEvaluationError as e:
                raise RuleEvaluationError(ErrorTemplate.modulo_by_zero(rule, 1)) from e

    def _finish(self, table: PluralTable) -> PluralTable:
        self._verify(table.tests, table.source)
        logger.debug(
            "Compiled %s plural rule %r: nplurals=%d, %d test(s), fallback %d",
            table.syntax,
            table.source,
            table.nplurals,
            len(table.tests),
            table.fallback_index,
        )
        return table


def _coerce_nplurals(value: object) -> int:
    match value:
        case bool():
            pass
        case int() if value >= 0:
            return value
        case str() if value.strip().isascii() and value.strip().isdigit():
            return int(value)
    raise MissingNPluralsError(ErrorTemplate.missing_nplurals(value))


def _header_field(header: Mapping[str, object], name: str) -> object:
    if name in header:
        return header[name]
    for key, value in header.items():
        if isinstance(key, str) and key.lower() == name:
            return value
    return None


def _unwrap(expression: Expression) -> Expression:
    while isinstance(expression, Grouping):
        expression = expression.expression
    return expression


def _closing_paren(text: str, start: int) -> int | None:
    """Index of the parenthesis closing the one opened at start."""
    depth = 0
    for position in range(start, len(text)):
        char = text[position]
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return position
    return None


def _is_enclosed(text: str) -> bool:
    return text.startswith("(") and _closing_paren(text, 0) == len(text) - 1


def _strip_enclosing(text: str) -> str:
    text = text.strip()
    while _is_enclosed(text):
        text = text[1:-1].strip()
    return text


def _enclose(condition: str) -> str:
    condition = condition.strip()
    return condition if _is_enclosed(condition) else f"({condition})"


def _split_ternary(text: str, chain: str) -> tuple[str, str, str] | None:
    """Split ``cond ? idx : rest`` at the first top-level ``?``.

    Returns None when the text holds no top-level ``?``, i.e. it is the
    trailing fallback index.
    """
    body = _strip_enclosing(text)
    depth = 0
    question: int | None = None
    for position, char in enumerate(body):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise GrammarError(ErrorTemplate.rule_syntax(body, "unbalanced ')'", position))
        elif char == "?" and depth == 0:
            question = position
            break
    if question is None:
        return None

    depth = 0
    for position in range(question + 1, len(body)):
        char = body[position]
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif char == ":" and depth == 0:
            return body[:question], body[question + 1 : position], body[position + 1 :]
    raise GrammarError(ErrorTemplate.rule_syntax(chain, "'?' without matching ':'"))


def _parse_index(text: str, chain: str) -> int:
    index = _strip_enclosing(text)
    if not (index.isascii() and index.isdigit()):
        raise GrammarError(
            ErrorTemplate.rule_syntax(chain, f"expected a form index, found {text.strip()!r}")
        )
    return int(index)


def _reject_literal_zero_divisor(node: Expression, rule: str) -> None:
    match node:
        case Grouping(expression=inner):
            _reject_literal_zero_divisor(inner, rule)
        case BinaryOp(op=op, left=left, right=right):
            if op is BinaryOperator.MOD and _unwrap(right) == Literal(0):
                raise GrammarError(ErrorTemplate.modulo_by_zero(rule))
            _reject_literal_zero_divisor(left, rule)
            _reject_literal_zero_divisor(right, rule)
        case _:
            pass
