"""Immutable catalog data model.

A catalog holds every translation for one (locale, domain). Document
catalogs carry their own compiled PluralTable and a key to VariantSet
mapping decided at load time; native catalogs wrap a Babel Translations
object and leave plural selection to gettext.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from pluralexengine.constants import HEADER_KEY

from .types import DomainName, LocaleCode, MessageKey

if TYPE_CHECKING:
    from babel.support import Translations

    from pluralexengine.rules import PluralTable

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Variants
    "Single",
    "Multi",
    "VariantSet",
    # Catalogs
    "DocumentCatalog",
    "NativeCatalog",
    "Catalog",
]


@dataclass(frozen=True, slots=True)
class Single:
    """One translation string used regardless of quantity."""

    text: str

    @property
    def is_blank(self) -> bool:
        """True when the translation is empty or whitespace only."""
        return not self.text.strip()


@dataclass(frozen=True, slots=True)
class Multi:
    """One translation string per plural form, indexed by PluralTable.select()."""

    forms: tuple[str, ...]

    def form(self, index: int) -> str | None:
        """Return the form at index, or None when it is absent or blank."""
        if 0 <= index < len(self.forms) and self.forms[index].strip():
            return self.forms[index]
        return None


type VariantSet = Single | Multi


@dataclass(frozen=True, slots=True)
class DocumentCatalog:
    """Parsed and validated JSON document catalog.

    Attributes:
        locale: Locale the catalog was loaded for
        domain: Domain the catalog was loaded for
        plural_table: Compiled plural rule for this catalog
        entries: Read-only key to variant mapping (header excluded)
        header: Read-only header pseudo-entry, exported unchanged
        source_path: File the catalog was read from, for diagnostics
    """

    locale: LocaleCode
    domain: DomainName
    plural_table: PluralTable
    entries: Mapping[MessageKey, VariantSet]
    header: Mapping[str, object] = field(default_factory=lambda: MappingProxyType({}))
    source_path: str | None = None

    def __post_init__(self) -> None:
        """Freeze entries and header behind read-only mapping proxies."""
        if not isinstance(self.entries, MappingProxyType):
            object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))
        if not isinstance(self.header, MappingProxyType):
            object.__setattr__(self, "header", MappingProxyType(dict(self.header)))

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def get(self, key: MessageKey) -> VariantSet | None:
        """Return the variant set for key, or None."""
        return self.entries.get(key)

    def to_document(self) -> dict[str, object]:
        """Rebuild the JSON-compatible document this catalog was loaded from.

        The header pseudo-entry comes first, followed by entries in their
        original order. Single variants become strings and Multi variants
        become lists.
        """
        document: dict[str, object] = {HEADER_KEY: dict(self.header)}
        for key, variant in self.entries.items():
            match variant:
                case Single(text=text):
                    document[key] = text
                case Multi(forms=forms):
                    document[key] = list(forms)
        return document


@dataclass(frozen=True, slots=True)
class NativeCatalog:
    """Compiled gettext catalog bound through Babel.

    Attributes:
        locale: Locale the catalog was loaded for
        domain: Domain the catalog was loaded for
        translations: Babel Translations object (read-only after load)
        source_path: File the catalog was read from, for diagnostics
    """

    locale: LocaleCode
    domain: DomainName
    translations: Translations = field(compare=False)
    source_path: str | None = None

    def gettext(self, key: MessageKey) -> str:
        """Return the translation of key, or key itself when untranslated."""
        return self.translations.gettext(key)

    def ngettext(self, singular: MessageKey, plural: MessageKey, n: int) -> str:
        """Return the form gettext selects for n, or a source key when untranslated."""
        return self.translations.ngettext(singular, plural, n)


type Catalog = DocumentCatalog | NativeCatalog
