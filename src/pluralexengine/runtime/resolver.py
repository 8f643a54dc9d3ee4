"""Translation resolver.

Resolves a message key, and optionally a quantity, to a localized string
for the resolver's current locale. The current language is explicit
state of the resolver; negotiating it from a request (query string,
cookie, Accept-Language) is the caller's job.

Lookup Behavior:
    Catalogs are loaded per domain on first use. A domain that fails to
    load is remembered as failed, logged once, and every lookup in it
    returns its source key. The default domain is loaded eagerly at
    construction, so a broken default catalog fails fast.

    Untranslated keys are returned unchanged and recorded in the missing
    translation log. Positional values are substituted with printf-style
    ``%`` formatting after the variant is chosen.

Thread Safety:
    Current-locale state is guarded by an RWLock: lookups share the read
    lock, while domain loads and locale switches swap state under the write
    lock. Catalogs themselves are immutable and read without locking.

Python 3.13+.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING

from pluralexengine.catalog.config import CatalogConfig
from pluralexengine.catalog.document import dump_document
from pluralexengine.catalog.loading import CatalogLoadResult, LoadSummary, PathCatalogLoader
from pluralexengine.catalog.model import Catalog, DocumentCatalog, Multi, NativeCatalog, Single
from pluralexengine.catalog.store import CatalogStore
from pluralexengine.constants import MAX_LOAD_RESULTS
from pluralexengine.core.rwlock import RWLock
from pluralexengine.diagnostics import (
    CatalogError,
    CatalogNotFoundError,
    ErrorTemplate,
    InvalidCharactersError,
    PlaceholderError,
    PluralexError,
    PluralRuleError,
    RuleEvaluationError,
    UnsupportedLocaleError,
)
from pluralexengine.enums import LoadStatus
from pluralexengine.locale_utils import to_html_lang, validate_locale_code
from pluralexengine.rules import check_quantity

from .missing import MissingTranslationLog

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pluralexengine.catalog.loading import CatalogLoader
    from pluralexengine.catalog.types import DomainName, LangKey, LocaleCode, MessageKey
    from pluralexengine.rules import PluralTable

__all__ = ["TranslationResolver"]

logger = logging.getLogger(__name__)

# Recoverable load failures; anything else propagates to the caller.
_LOAD_ERRORS = (CatalogError, PluralRuleError)


class TranslationResolver:
    """Key and quantity to localized string, for one current locale.

    Example:
        >>> resolver = TranslationResolver.from_directory(
        ...     "locales",
        ...     {"en": "en_US", "sr": "sr_RS"},
        ...     default_domain="app",
        ...     default_lang="en",
        ...     lang="sr",
        ... )
        >>> resolver.ngettext("%d file", "%d files", 3, 3)
        '3 fajla'
        >>> resolver.switch_locale("en")
        'sr'
    """

    __slots__ = (
        "_config",
        "_default_domain",
        "_default_lang",
        "_default_table",
        "_domains",
        "_failures",
        "_lang",
        "_load_results",
        "_locale",
        "_locales",
        "_lock",
        "_missing",
        "_store",
        "_switch_lock",
    )

    def __init__(
        self,
        locales: Mapping[LangKey, LocaleCode],
        loader: CatalogLoader,
        default_domain: DomainName,
        default_lang: LangKey,
        *,
        lang: LangKey | None = None,
        config: CatalogConfig | None = None,
    ) -> None:
        """Initialize resolver and load the default domain.

        Args:
            locales: Supported language keys mapped to catalog locale codes
                (e.g., {"en": "en_US", "fr": "fr_FR"})
            loader: Source of catalog files
            default_domain: Domain used by gettext() and ngettext()
            default_lang: Language used when lang is absent or unsupported
            lang: Language negotiated by the caller for this resolver
            config: Backend and plural rule settings (default: CatalogConfig())

        Raises:
            ValueError: If locales is empty, a locale code is malformed, or
                default_domain is empty
            UnsupportedLocaleError: If default_lang is not in locales
            CatalogError: If the default domain's catalog cannot be loaded
            PluralRuleError: If the default domain's plural rule, or the
                configured default plural rule, cannot be compiled
        """
        if not locales:
            msg = "At least one locale is required"
            raise ValueError(msg)
        for key, locale in locales.items():
            if not key:
                msg = "Language keys cannot be empty"
                raise ValueError(msg)
            validate_locale_code(locale)
        if not default_domain:
            msg = "default_domain cannot be empty"
            raise ValueError(msg)

        self._locales: Mapping[LangKey, LocaleCode] = MappingProxyType(dict(locales))
        if default_lang not in self._locales:
            raise UnsupportedLocaleError(
                ErrorTemplate.invalid_default_locale(default_lang, tuple(self._locales))
            )
        if lang is not None and lang not in self._locales:
            logger.info("Language '%s' is not supported; using default '%s'", lang, default_lang)
            lang = None

        self._default_lang = default_lang
        self._default_domain = default_domain
        self._lang: LangKey = lang if lang is not None else default_lang
        self._locale: LocaleCode = self._locales[self._lang]

        self._config = config if config is not None else CatalogConfig()
        self._store = CatalogStore(loader, config=self._config)
        self._default_table: PluralTable = self._store.compiler.compile_default(
            self._config.default_plural
        )

        self._domains: dict[DomainName, Catalog] = {}
        self._failures: dict[DomainName, PluralexError] = {}
        self._load_results: deque[CatalogLoadResult] = deque(maxlen=MAX_LOAD_RESULTS)
        self._missing = MissingTranslationLog()
        self._lock = RWLock()
        self._switch_lock = threading.Lock()

        self.load_domain(default_domain)

    @classmethod
    def from_directory(
        cls,
        locales_dir: str | Path,
        locales: Mapping[LangKey, LocaleCode],
        default_domain: DomainName,
        default_lang: LangKey,
        *,
        lang: LangKey | None = None,
        config: CatalogConfig | None = None,
    ) -> TranslationResolver:
        """Create a resolver reading catalogs from ``{locales_dir}/{locale}/``."""
        loader = PathCatalogLoader(str(Path(locales_dir) / "{locale}"), root_dir=str(locales_dir))
        return cls(locales, loader, default_domain, default_lang, lang=lang, config=config)

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return (
            f"TranslationResolver(lang={self.lang!r}, locale={self.locale!r}, "
            f"domains={list(self.loaded_domains)!r})"
        )

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def lang(self) -> LangKey:
        """Current language key."""
        with self._lock.read():
            return self._lang

    @property
    def locale(self) -> LocaleCode:
        """Catalog locale code of the current language."""
        with self._lock.read():
            return self._locale

    @property
    def html_lang(self) -> str:
        """Current locale formatted for an HTML ``lang`` attribute (``en-us``)."""
        return to_html_lang(self.locale)

    @property
    def default_lang(self) -> LangKey:
        """Language used when none, or an unsupported one, was requested."""
        return self._default_lang

    @property
    def default_domain(self) -> DomainName:
        """Domain used by the unqualified lookup methods."""
        return self._default_domain

    @property
    def default_plural(self) -> str:
        """Two-way rule used when a domain's catalog is unavailable."""
        return self._config.default_plural

    @property
    def supported_langs(self) -> tuple[LangKey, ...]:
        """Configured language keys in declaration order."""
        return tuple(self._locales)

    @property
    def config(self) -> CatalogConfig:
        """Backend and plural rule settings."""
        return self._config

    @property
    def store(self) -> CatalogStore:
        """Underlying catalog cache."""
        return self._store

    @property
    def loaded_domains(self) -> tuple[DomainName, ...]:
        """Domains with an active catalog for the current locale."""
        with self._lock.read():
            return tuple(self._domains)

    def get_catalog(self, domain: DomainName | None = None) -> Catalog | None:
        """Return the active catalog for a domain without loading it."""
        with self._lock.read():
            return self._domains.get(self._default_domain if domain is None else domain)

    def get_load_summary(self) -> LoadSummary:
        """Summary of the most recent catalog loads this resolver attempted.

        At most MAX_LOAD_RESULTS results are kept; older ones are dropped.
        """
        with self._lock.read():
            return LoadSummary(results=tuple(self._load_results))

    # ------------------------------------------------------------------
    # Missing translations
    # ------------------------------------------------------------------

    def get_missing_translations(self, domain: DomainName | None = None) -> tuple[MessageKey, ...]:
        """Keys recorded as untranslated in a domain, in first-seen order."""
        return self._missing.get(self._default_domain if domain is None else domain)

    @property
    def missing_translations(self) -> Mapping[DomainName, tuple[MessageKey, ...]]:
        """Snapshot of untranslated keys for every domain."""
        return self._missing.snapshot()

    def reset_missing_translations(self, domain: DomainName | None = None) -> None:
        """Forget recorded untranslated keys for one domain, or for all."""
        self._missing.reset(domain)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_domain(self, domain: DomainName | None = None, *, force_reload: bool = False) -> Catalog:
        """Load a domain's catalog for the current locale and make it active.

        Args:
            domain: Domain name (default: the default domain)
            force_reload: Re-read the catalog even when cached

        Returns:
            The active catalog; the same object on repeated calls unless
            force_reload replaced it

        Raises:
            CatalogError: If the catalog cannot be found, parsed or validated
            PluralRuleError: If the catalog's plural rule cannot be compiled
        """
        domain = self._default_domain if domain is None else domain
        with self._lock.read():
            locale = self._locale
        path = self._store.loader.describe_path(locale, domain, self._config.backend)

        try:
            catalog = self._store.load(locale, domain, force_reload=force_reload)
        except _LOAD_ERRORS as e:
            with self._lock.write():
                self._load_results.append(_failed_result(locale, domain, e, path))
                if self._locale == locale and domain not in self._domains:
                    self._failures[domain] = e
            raise

        with self._lock.write():
            self._load_results.append(
                CatalogLoadResult(locale, domain, LoadStatus.SUCCESS, source_path=path)
            )
            if self._locale == locale:
                self._domains[domain] = catalog
                self._failures.pop(domain, None)
        return catalog

    def _active_catalog(self, domain: DomainName) -> Catalog | None:
        """Return the domain's catalog, loading it lazily; None if unavailable."""
        with self._lock.read():
            catalog = self._domains.get(domain)
            failure = self._failures.get(domain)
        if catalog is not None:
            return catalog
        if failure is not None:
            if isinstance(failure, InvalidCharactersError):
                raise failure
            return None

        try:
            return self.load_domain(domain)
        except InvalidCharactersError:
            raise
        except _LOAD_ERRORS as e:
            logger.warning("Domain '%s' unavailable for locale '%s': %s", domain, self.locale, e)
            return None

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def lookup_singular(self, domain: DomainName, key: MessageKey, *values: object) -> str:
        """Translate a key that has no plural forms.

        Args:
            domain: Domain to look in
            key: Source-language message
            *values: Positional values for ``%`` placeholders

        Returns:
            The translation, or key itself when untranslated

        Raises:
            PlaceholderError: If values do not fit the text's placeholders
            InvalidCharactersError: If the domain's plural rule is corrupt
        """
        translation: str | None = None
        match self._active_catalog(domain):
            case DocumentCatalog() as catalog:
                variant = catalog.get(key)
                if isinstance(variant, Single) and not variant.is_blank:
                    translation = variant.text
            case NativeCatalog() as catalog:
                text = catalog.gettext(key)
                if text != key:
                    translation = text

        if translation is None:
            self._missing.record(domain, key)
            translation = key
        return _substitute(translation, values)

    def lookup_plural(
        self,
        domain: DomainName,
        key_singular: MessageKey,
        key_plural: MessageKey,
        quantity: int,
        *values: object,
    ) -> str:
        """Translate a key whose form depends on a quantity.

        Args:
            domain: Domain to look in
            key_singular: Source-language singular message
            key_plural: Source-language plural message
            quantity: Integer the form is chosen for; negative values are
                treated as their absolute value
            *values: Positional values for ``%`` placeholders

        Returns:
            The selected translation, or a source key when untranslated

        Raises:
            TypeError: If quantity is not an int
            PlaceholderError: If values do not fit the text's placeholders
            InvalidCharactersError: If the domain's plural rule is corrupt
        """
        n = check_quantity(quantity)
        match self._active_catalog(domain):
            case DocumentCatalog() as catalog:
                translation = self._select_document_form(catalog, domain, key_singular, key_plural, n)
            case NativeCatalog() as catalog:
                translation = catalog.ngettext(key_singular, key_plural, n)
                if translation in (key_singular, key_plural):
                    self._missing.record(
                        domain,
                        key_singular if key_singular == key_plural else f"{key_singular} / {key_plural}",
                    )
            case _:
                self._missing.record(domain, key_singular)
                self._missing.record(domain, key_plural)
                translation = key_plural if self._default_table.select(n) else key_singular
        return _substitute(translation, values)

    def _select_document_form(
        self,
        catalog: DocumentCatalog,
        domain: DomainName,
        key_singular: MessageKey,
        key_plural: MessageKey,
        n: int,
    ) -> str:
        table = catalog.plural_table
        if table.is_degenerate:
            return self._singular_text(catalog, domain, key_singular)
        try:
            index = table.select(n)
        except RuleEvaluationError as e:
            logger.warning(
                "Plural rule of %s failed for n=%d: %s", catalog.source_path or domain, n, e
            )
            return key_singular

        entry = catalog.get(key_plural)
        if isinstance(entry, Multi):
            form = entry.form(index)
            if form is not None:
                return form
            self._missing.record(domain, f"{key_plural} [index {index}]")
            return key_plural

        if index == 0:
            return self._singular_text(catalog, domain, key_singular)

        if isinstance(entry, Single) and not entry.is_blank:
            if table.nplurals == 2:
                return entry.text
            self._missing.record(domain, f"{key_plural} [index {index}]")
        else:
            self._missing.record(domain, key_plural)
        return key_plural

    def _singular_text(self, catalog: DocumentCatalog, domain: DomainName, key: MessageKey) -> str:
        match catalog.get(key):
            case Single() as variant if not variant.is_blank:
                return variant.text
            case Multi() as variant if (form := variant.form(0)) is not None:
                return form
        self._missing.record(domain, key)
        return key

    def gettext(self, key: MessageKey, *values: object) -> str:
        """Translate key in the default domain."""
        return self.lookup_singular(self._default_domain, key, *values)

    def ngettext(
        self, key_singular: MessageKey, key_plural: MessageKey, quantity: int, *values: object
    ) -> str:
        """Translate a quantity-dependent key in the default domain."""
        return self.lookup_plural(self._default_domain, key_singular, key_plural, quantity, *values)

    def dgettext(self, domain: DomainName, key: MessageKey, *values: object) -> str:
        """Translate key in the given domain."""
        return self.lookup_singular(domain, key, *values)

    def dngettext(
        self,
        domain: DomainName,
        key_singular: MessageKey,
        key_plural: MessageKey,
        quantity: int,
        *values: object,
    ) -> str:
        """Translate a quantity-dependent key in the given domain."""
        return self.lookup_plural(domain, key_singular, key_plural, quantity, *values)

    # ------------------------------------------------------------------
    # Locale switching and export
    # ------------------------------------------------------------------

    def switch_locale(self, lang: LangKey, *, rollback_on_failure: bool = True) -> LangKey:
        """Make another supported language current.

        The default domain and every other active domain are loaded for the
        new locale before anything changes. Once all of them load, they are
        installed and the language is swapped in one step. After a committed
        switch, the previous locale's catalogs are evicted from the store
        unless both languages share a locale.

        Args:
            lang: Language key to switch to
            rollback_on_failure: When True (default), a failed load leaves the
                resolver exactly as it was. When False, the new language is
                committed with the domains that did load, the rest are marked
                failed, and the first failure is raised afterwards.

        Returns:
            The previous language key

        Raises:
            UnsupportedLocaleError: If lang is not a supported language
            CatalogError: If a domain's catalog cannot be loaded
            PluralRuleError: If a domain's plural rule cannot be compiled
        """
        if lang not in self._locales:
            raise UnsupportedLocaleError(ErrorTemplate.unsupported_locale(lang, self.supported_langs))
        new_locale = self._locales[lang]

        with self._switch_lock:
            with self._lock.read():
                previous_lang = self._lang
                previous_locale = self._locale
                domains = list(dict.fromkeys([self._default_domain, *self._domains]))

            staged: dict[DomainName, Catalog] = {}
            failures: dict[DomainName, PluralexError] = {}
            results: list[CatalogLoadResult] = []
            for domain in domains:
                path = self._store.loader.describe_path(new_locale, domain, self._config.backend)
                try:
                    staged[domain] = self._store.build(new_locale, domain)
                except _LOAD_ERRORS as e:
                    results.append(_failed_result(new_locale, domain, e, path))
                    if rollback_on_failure:
                        with self._lock.write():
                            self._load_results.extend(results)
                        logger.warning(
                            "Switch to '%s' failed on domain '%s'; staying on '%s'",
                            lang,
                            domain,
                            previous_lang,
                        )
                        raise
                    failures[domain] = e
                else:
                    results.append(
                        CatalogLoadResult(new_locale, domain, LoadStatus.SUCCESS, source_path=path)
                    )

            self._store.install(staged.values())
            with self._lock.write():
                self._lang = lang
                self._locale = new_locale
                self._domains = staged
                self._failures = failures
                self._load_results.extend(results)
            if previous_locale != new_locale:
                self._store.evict(previous_locale)

        logger.info("Switched language from '%s' to '%s' (%s)", previous_lang, lang, new_locale)
        if failures:
            raise next(iter(failures.values()))
        return previous_lang

    def export_catalog_as_document(self, domain: DomainName | None = None) -> str:
        """Serialize a domain's document catalog as JSON text.

        The output is a valid document catalog: loading it yields the same
        header and the same key to variant mapping.

        Args:
            domain: Domain name (default: the default domain)

        Returns:
            JSON text

        Raises:
            CatalogError: If the domain cannot be loaded or is a native catalog
            PluralRuleError: If the domain's plural rule cannot be compiled
        """
        domain = self._default_domain if domain is None else domain
        catalog = self.get_catalog(domain)
        if catalog is None:
            catalog = self.load_domain(domain)
        if not isinstance(catalog, DocumentCatalog):
            raise CatalogError(ErrorTemplate.catalog_not_exportable(domain))
        return dump_document(catalog)


def _failed_result(
    locale: LocaleCode, domain: DomainName, error: PluralexError, path: str
) -> CatalogLoadResult:
    status = LoadStatus.NOT_FOUND if isinstance(error, CatalogNotFoundError) else LoadStatus.ERROR
    return CatalogLoadResult(locale, domain, status, error=error, source_path=path)


def _substitute(text: str, values: tuple[object, ...]) -> str:
    """Apply printf-style positional values to the selected text."""
    if not values:
        return text
    try:
        return text % values
    except (TypeError, ValueError, KeyError) as e:
        raise PlaceholderError(
            ErrorTemplate.placeholder_mismatch(text, len(values), str(e)), fallback_value=text
        ) from e
