"""PluraLexEngine exception hierarchy with structured diagnostics.

All exceptions optionally store a Diagnostic for rich error information.
Rule errors are raised at catalog load time; catalog errors are raised
by the store; placeholder errors are raised at lookup time.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic

# ruff: noqa: RUF022 - __all__ organized by hierarchy for readability
__all__ = [
    "PluralexError",
    # Plural rules
    "PluralRuleError",
    "GrammarError",
    "RuleEvaluationError",
    "DepthLimitExceededError",
    "InvalidCharactersError",
    "MissingNPluralsError",
    "MissingPluralExpressionError",
    "NPluralsMismatchError",
    # Catalogs
    "CatalogError",
    "CatalogNotFoundError",
    "MalformedCatalogError",
    "VariantCountMismatchError",
    # Lookups
    "UnsupportedLocaleError",
    "PlaceholderError",
]


class PluralexError(Exception):
    """Base exception for all PluraLexEngine errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize PluralexError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class PluralRuleError(PluralexError):
    """A plural rule or its header fields cannot be compiled.

    Always raised at catalog load time, never during a lookup.
    """


class GrammarError(PluralRuleError):
    """Rule text does not reduce to one well-formed expression.

    Examples:
    - Dangling operator: ``n ==``
    - Unbalanced parentheses: ``(n % 10 == 1``
    - Ternary chain index that is not an integer literal
    """


class RuleEvaluationError(GrammarError):
    """A compiled rule faulted while being evaluated.

    The only run-time fault of the grammar is modulo by zero. Raised by
    the load-time self-test, and by lookups when a rule divides by a
    value derived from ``n``.
    """


class DepthLimitExceededError(GrammarError):
    """Rule nesting exceeds the maximum parser or evaluator depth.

    This error indicates either adversarial rule text designed to exhaust
    the stack, or a programmatically built AST that is far deeper than any
    real plural rule.
    """


class InvalidCharactersError(PluralRuleError):
    """Rule text contains characters outside the closed rule alphabet.

    Checked before tokenization and evaluation. Lookups propagate this
    error instead of recovering from it, since it signals a tampered or
    corrupt catalog rather than a missing one.
    """


class MissingNPluralsError(PluralRuleError):
    """The header declares no usable number of plural forms."""


class MissingPluralExpressionError(PluralRuleError):
    """The header declares two or more forms but no plural expression."""


class NPluralsMismatchError(PluralRuleError):
    """Declared form count disagrees with the rule's decision points.

    Also raised when a ternary branch selects an index outside
    ``[0, nplurals)``.
    """


class CatalogError(PluralexError):
    """A catalog cannot be located, parsed or validated."""


class CatalogNotFoundError(CatalogError):
    """No catalog file exists for the requested locale and domain."""


class MalformedCatalogError(CatalogError):
    """Catalog file exists but its content has the wrong shape.

    Examples:
    - Invalid JSON, or a top level that is not an object
    - Header that is not an object
    - Entry value that is neither a string nor a list of strings
    - Corrupt binary gettext catalog
    """


class VariantCountMismatchError(CatalogError):
    """A multi-variant entry does not have exactly nplurals forms."""


class UnsupportedLocaleError(PluralexError):
    """Language key is not in the resolver's supported locale mapping."""


class PlaceholderError(PluralexError):
    """Positional values do not fit the selected translation's placeholders.

    Attributes:
        fallback_value: The selected text before substitution
    """

    def __init__(self, message: str | Diagnostic, *, fallback_value: str = "") -> None:
        """Initialize PlaceholderError.

        Args:
            message: Error message string OR Diagnostic object
            fallback_value: The selected text before substitution
        """
        super().__init__(message)
        self.fallback_value = fallback_value
