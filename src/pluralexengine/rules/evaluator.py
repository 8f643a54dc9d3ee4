"""Plural rule evaluator.

A pure recursive interpreter over the rule AST. Follows C semantics:
comparisons and boolean combinators yield truth values, ``%`` coerces
truth values to 0 or 1, and ``&&``/``||`` short-circuit.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from pluralexengine.constants import MAX_DEPTH
from pluralexengine.core.depth_guard import DepthGuard
from pluralexengine.diagnostics import ErrorTemplate, RuleEvaluationError
from pluralexengine.enums import BinaryOperator

from .ast import BinaryOp, Expression, Grouping, Literal, Variable

__all__ = ["check_quantity", "evaluate"]


def check_quantity(n: object) -> int:
    """Validate a plural quantity and normalize it to a non-negative int.

    Args:
        n: Quantity supplied by the caller

    Returns:
        abs(n)

    Raises:
        TypeError: If n is not an int (bool is rejected too)
    """
    if isinstance(n, bool) or not isinstance(n, int):
        raise TypeError(str(ErrorTemplate.invalid_quantity(n)))
    return abs(n)


def evaluate(expression: Expression, n: int, *, max_depth: int = MAX_DEPTH) -> bool | int:
    """Evaluate a rule expression for quantity n.

    Args:
        expression: Root node produced by RuleParser
        n: Quantity; negative values are evaluated as their absolute value
        max_depth: Deepest parenthesis nesting walked (default: MAX_DEPTH)

    Returns:
        bool for comparisons and boolean combinators, int otherwise

    Raises:
        TypeError: If n is not an int
        RuleEvaluationError: If the rule computes a remainder by zero
        DepthLimitExceededError: If parentheses nest deeper than max_depth
    """
    return _evaluate(expression, check_quantity(n), DepthGuard(max_depth=max_depth))


def _evaluate(node: Expression, n: int, guard: DepthGuard) -> bool | int:
    # Only parentheses count toward depth, matching the parser. Operator
    # chains are bounded by the rule length limit instead.
    match node:
        case Literal(value=value):
            return value
        case Variable():
            return n
        case Grouping(expression=inner):
            with guard:
                return _evaluate(inner, n, guard)
        case BinaryOp(op=BinaryOperator.AND, left=left, right=right):
            return bool(_evaluate(left, n, guard)) and bool(_evaluate(right, n, guard))
        case BinaryOp(op=BinaryOperator.OR, left=left, right=right):
            return bool(_evaluate(left, n, guard)) or bool(_evaluate(right, n, guard))
        case BinaryOp(op=op, left=left, right=right):
            return _apply(op, int(_evaluate(left, n, guard)), int(_evaluate(right, n, guard)), n)
        case _:
            msg = f"Unknown plural rule node: {type(node).__name__}"
            raise TypeError(msg)


def _apply(op: BinaryOperator, left: int, right: int, n: int) -> bool | int:
    match op:
        case BinaryOperator.MOD:
            if right == 0:
                raise RuleEvaluationError(ErrorTemplate.modulo_by_zero(n=n))
            return left % right
        case BinaryOperator.EQ:
            return left == right
        case BinaryOperator.NE:
            return left != right
        case BinaryOperator.LT:
            return left < right
        case BinaryOperator.LE:
            return left <= right
        case BinaryOperator.GT:
            return left > right
        case BinaryOperator.GE:
            return left >= right
        case _:
            msg = f"Unsupported operator in arithmetic position: {op!r}"
            raise TypeError(msg)
