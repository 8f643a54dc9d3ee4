"""Plural rule AST.

A closed set of immutable node types for the restricted C-like grammar
used by gettext plural rules. There is exactly one variable (``n``), no
function calls, no assignment and no unary operators, so evaluating a tree
can never do anything except integer arithmetic and comparison.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeIs

from pluralexengine.constants import RULE_VARIABLE
from pluralexengine.enums import BinaryOperator

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Nodes
    "Literal",
    "Variable",
    "BinaryOp",
    "Grouping",
    # Type aliases
    "Expression",
    # Operator classes
    "BOOLEAN_OPERATORS",
    "COMPARISON_OPERATORS",
    "is_boolean_expression",
]

COMPARISON_OPERATORS: frozenset[BinaryOperator] = frozenset({
    BinaryOperator.EQ,
    BinaryOperator.NE,
    BinaryOperator.LT,
    BinaryOperator.LE,
    BinaryOperator.GT,
    BinaryOperator.GE,
})

BOOLEAN_OPERATORS: frozenset[BinaryOperator] = frozenset({
    BinaryOperator.AND,
    BinaryOperator.OR,
})


@dataclass(frozen=True, slots=True)
class Literal:
    """Non-negative integer literal: ``10``."""

    value: int

    def __post_init__(self) -> None:
        """Reject negative and non-integer literals.

        Raises:
            ValueError: If value is negative or not an int
        """
        if isinstance(self.value, bool) or not isinstance(self.value, int) or self.value < 0:
            msg = f"Literal value must be a non-negative int, got {self.value!r}"
            raise ValueError(msg)

    @staticmethod
    def guard(node: object) -> TypeIs[Literal]:
        """Type guard for Literal nodes."""
        return isinstance(node, Literal)


@dataclass(frozen=True, slots=True)
class Variable:
    """The quantity being pluralized: ``n``."""

    name: str = RULE_VARIABLE

    def __post_init__(self) -> None:
        """Reject any variable other than ``n``.

        Raises:
            ValueError: If name is not ``n``
        """
        if self.name != RULE_VARIABLE:
            msg = f"Plural rules reference only '{RULE_VARIABLE}', got {self.name!r}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class BinaryOp:
    """Binary operation: ``n % 10``, ``n != 1``, ``a && b``."""

    op: BinaryOperator
    left: Expression
    right: Expression

    @staticmethod
    def guard(node: object) -> TypeIs[BinaryOp]:
        """Type guard for BinaryOp nodes."""
        return isinstance(node, BinaryOp)


@dataclass(frozen=True, slots=True)
class Grouping:
    """Parenthesized sub-expression: ``(n % 10)``.

    Kept as a distinct node so that serialization reproduces the author's
    parentheses and parse/serialize round trips are structural identities.
    """

    expression: Expression


type Expression = Literal | Variable | BinaryOp | Grouping


def is_boolean_expression(node: Expression) -> bool:
    """Check whether a node always evaluates to a truth value.

    Args:
        node: Expression to inspect

    Returns:
        True for comparisons and boolean combinators, looking through
        parentheses; False for arithmetic, literals and ``n``
    """
    match node:
        case Grouping(expression=inner):
            return is_boolean_expression(inner)
        case BinaryOp(op=op):
            return op in COMPARISON_OPERATORS or op in BOOLEAN_OPERATORS
        case _:
            return False
