"""Diagnostic codes and data structures.

Defines error codes and the structured diagnostic carried by every
PluraLexEngine exception.
Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Locale errors (unsupported or invalid locale keys)
        2000-2999: Catalog errors (missing, malformed or inconsistent catalogs)
        3000-3999: Plural rule errors (grammar, alphabet, header fields)
        4000-4999: Lookup errors (quantities and placeholder substitution)
    """

    # Locale errors (1000-1999)
    UNSUPPORTED_LOCALE = 1001
    INVALID_DEFAULT_LOCALE = 1002

    # Catalog errors (2000-2999)
    CATALOG_NOT_FOUND = 2001
    CATALOG_MALFORMED = 2002
    VARIANT_COUNT_MISMATCH = 2003
    CATALOG_NOT_EXPORTABLE = 2004

    # Plural rule errors (3000-3999)
    RULE_GRAMMAR = 3001
    RULE_INVALID_CHARACTERS = 3002
    RULE_MISSING_NPLURALS = 3003
    RULE_MISSING_EXPRESSION = 3004
    RULE_NPLURALS_MISMATCH = 3005
    RULE_EVALUATION_FAILED = 3006
    RULE_DEPTH_EXCEEDED = 3007
    RULE_TOO_LONG = 3008

    # Lookup errors (4000-4999)
    INVALID_QUANTITY = 4001
    PLACEHOLDER_MISMATCH = 4002


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Modelled on compiler diagnostics: a stable code, a one-line message,
    and optional pointers that help the catalog author fix the problem.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        position: Character offset inside the rule text (rule errors only)
        source_text: Rule text or key the position refers to
        source_path: Catalog file the error was found in
        hint: Suggestion for fixing the error
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    position: int | None = None
    source_text: str | None = None
    source_path: str | None = None
    hint: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __post_init__(self) -> None:
        """Validate position invariant.

        Raises:
            ValueError: If position is negative
        """
        if self.position is not None and self.position < 0:
            msg = f"Diagnostic.position must be >= 0, got {self.position}"
            raise ValueError(msg)

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def with_source_path(self, source_path: str) -> Diagnostic:
        """Return a copy of this diagnostic attributed to a catalog file."""
        return Diagnostic(
            code=self.code,
            message=self.message,
            position=self.position,
            source_text=self.source_text,
            source_path=source_path,
            hint=self.hint,
            severity=self.severity,
        )

    def format_error(self) -> str:
        """Format diagnostic in compiler style.

        Example output:
            error[RULE_INVALID_CHARACTERS]: Plural rule contains invalid characters: 'x'
              --> locales/fr/app.json
              | n x 2
              |   ^
              = help: Rules may only use n, digits, parentheses and C operators

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
