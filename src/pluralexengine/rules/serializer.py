"""Plural rule serializer.

Renders rule ASTs and compiled plural tables back to text. Parentheses
come only from Grouping nodes, so serializing a parsed rule and parsing
the result reproduces an equal tree.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .ast import BinaryOp, Expression, Grouping, Literal, Variable

if TYPE_CHECKING:
    from .compiler import PluralTable

__all__ = ["serialize_rule", "serialize_table"]


def serialize_rule(expression: Expression) -> str:
    """Render an expression as rule text.

    Example:
        >>> serialize_rule(parse_rule("n%10==1&&(n%100!=11)"))
        'n % 10 == 1 && (n % 100 != 11)'
    """
    match expression:
        case Literal(value=value):
            return str(value)
        case Variable(name=name):
            return name
        case Grouping(expression=inner):
            return f"({serialize_rule(inner)})"
        case BinaryOp(op=op, left=left, right=right):
            return f"{serialize_rule(left)} {op} {serialize_rule(right)}"
        case _:
            msg = f"Unknown plural rule node: {type(expression).__name__}"
            raise TypeError(msg)


def serialize_table(table: PluralTable) -> str:
    """Render a compiled table as a chained ``plural-forms`` header value.

    Each row becomes one ``(cond) ? idx :`` segment, in evaluation order,
    followed by the fallback index. Degenerate tables render as the
    constant rule ``plural=0``.

    Example:
        >>> serialize_table(RuleCompiler().compile_direct(2, "n != 1"))
        'nplurals=2; plural=(n != 1) ? 1 : 0;'
    """
    if not table.tests:
        return f"nplurals={table.nplurals}; plural={table.fallback_index};"

    segments = [
        f"({serialize_rule(test.predicate)}) ? {test.variant_index} : " for test in table.tests
    ]
    chain = "".join(segments) + str(table.fallback_index)
    return f"nplurals={table.nplurals}; plural={chain};"
