"""Enumerations for PluraLexEngine type-safe constants.

Uses StrEnum for automatic string conversion, so configuration values
read from files or environment variables compare equal to members.

Python 3.13+.
"""

from enum import StrEnum


class CatalogBackend(StrEnum):
    """Storage backend for message catalogs.

    StrEnum provides automatic string conversion: str(CatalogBackend.NATIVE) == "native"
    """

    DOCUMENT = "document"
    """JSON document per (locale, domain): {base}/{locale}/{domain}.json"""

    NATIVE = "native"
    """Compiled gettext catalog: {base}/{locale}/LC_MESSAGES/{domain}.mo"""


class PluralRuleSyntax(StrEnum):
    """How a document catalog header declares its plural rule."""

    DIRECT = "direct"
    """Separate header fields: {"nplurals": "3", "plural": "<expression>"}"""

    CHAINED = "chained"
    """Single gettext field: {"plural-forms": "nplurals=3; plural=<chain>;"}"""


class BinaryOperator(StrEnum):
    """Operators accepted by the plural-rule grammar.

    Member values are the exact source tokens, so serialization is
    str(operator).
    """

    OR = "||"
    AND = "&&"
    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    MOD = "%"


class LoadStatus(StrEnum):
    """Status of a catalog load attempt.

    StrEnum provides automatic string conversion: str(LoadStatus.SUCCESS) == "success"
    """

    SUCCESS = "success"
    """Catalog loaded and validated"""

    NOT_FOUND = "not_found"
    """Catalog file does not exist for this locale"""

    ERROR = "error"
    """Catalog exists but failed to parse or validate"""


__all__ = [
    "BinaryOperator",
    "CatalogBackend",
    "LoadStatus",
    "PluralRuleSyntax",
]
