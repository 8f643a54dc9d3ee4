"""Structured diagnostics and the PluraLexEngine exception hierarchy.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode
from .errors import (
    CatalogError,
    CatalogNotFoundError,
    DepthLimitExceededError,
    GrammarError,
    InvalidCharactersError,
    MalformedCatalogError,
    MissingNPluralsError,
    MissingPluralExpressionError,
    NPluralsMismatchError,
    PlaceholderError,
    PluralexError,
    PluralRuleError,
    RuleEvaluationError,
    UnsupportedLocaleError,
    VariantCountMismatchError,
)
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import ErrorTemplate

__all__ = [
    "CatalogError",
    "CatalogNotFoundError",
    "DepthLimitExceededError",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "ErrorTemplate",
    "GrammarError",
    "InvalidCharactersError",
    "MalformedCatalogError",
    "MissingNPluralsError",
    "MissingPluralExpressionError",
    "NPluralsMismatchError",
    "OutputFormat",
    "PlaceholderError",
    "PluralRuleError",
    "PluralexError",
    "RuleEvaluationError",
    "UnsupportedLocaleError",
    "VariantCountMismatchError",
]
