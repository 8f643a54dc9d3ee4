"""Plural rule grammar, parser, evaluator and compiler.

Public API:
    parse_rule - Parse one rule expression into an AST
    evaluate - Evaluate an expression for a quantity
    RuleParser - Parser with configurable input limits
    RuleCompiler - Header fields to PluralTable
    PluralTable, PluralTest - Compiled rule representation
    serialize_rule, serialize_table - AST and table to text

Python 3.13+. Zero external dependencies.
"""

from .ast import BinaryOp, Expression, Grouping, Literal, Variable
from .compiler import PluralTable, PluralTest, RuleCompiler
from .evaluator import check_quantity, evaluate
from .parser import RuleParser, parse_rule, validate_alphabet
from .serializer import serialize_rule, serialize_table

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # AST
    "BinaryOp",
    "Expression",
    "Grouping",
    "Literal",
    "Variable",
    # Parsing
    "RuleParser",
    "parse_rule",
    "validate_alphabet",
    # Evaluation
    "check_quantity",
    "evaluate",
    # Compilation
    "PluralTable",
    "PluralTest",
    "RuleCompiler",
    # Serialization
    "serialize_rule",
    "serialize_table",
]
