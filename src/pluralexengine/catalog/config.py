"""Catalog configuration.

Immutable configuration shared by CatalogStore and TranslationResolver.
Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

from pluralexengine.constants import DEFAULT_PLURAL_RULE, MAX_RULE_LENGTH
from pluralexengine.enums import CatalogBackend, PluralRuleSyntax

__all__ = ["CatalogConfig"]


@dataclass(frozen=True, slots=True)
class CatalogConfig:
    """How catalogs are stored and how their plural rules are read.

    Attributes:
        backend: Where catalogs come from (JSON documents or gettext .mo files)
        rule_syntax: Header style of document catalogs (direct or chained)
        use_custom_plural_forms: When False, document headers are ignored and
            every catalog uses default_plural with two forms
        default_plural: Two-way rule used for unloadable catalogs, and for all
            document catalogs when use_custom_plural_forms is False
        max_rule_length: Longest plural rule text accepted, in characters

    Example:
        >>> config = CatalogConfig(rule_syntax=PluralRuleSyntax.CHAINED)
        >>> config.backend
        <CatalogBackend.DOCUMENT: 'document'>
    """

    backend: CatalogBackend = CatalogBackend.DOCUMENT
    rule_syntax: PluralRuleSyntax = PluralRuleSyntax.DIRECT
    use_custom_plural_forms: bool = True
    default_plural: str = DEFAULT_PLURAL_RULE
    max_rule_length: int = MAX_RULE_LENGTH

    def __post_init__(self) -> None:
        """Normalize string enum values and validate fields.

        Raises:
            ValueError: If backend or rule_syntax is unknown, default_plural is
                blank, or max_rule_length is not positive
            TypeError: If default_plural is not a string
        """
        object.__setattr__(self, "backend", CatalogBackend(self.backend))
        object.__setattr__(self, "rule_syntax", PluralRuleSyntax(self.rule_syntax))
        if not isinstance(self.default_plural, str):
            msg = f"default_plural must be str, got {type(self.default_plural).__name__}"
            raise TypeError(msg)
        if not self.default_plural.strip():
            msg = "default_plural cannot be blank"
            raise ValueError(msg)
        if self.max_rule_length < 1:
            msg = f"max_rule_length must be positive, got {self.max_rule_length}"
            raise ValueError(msg)
