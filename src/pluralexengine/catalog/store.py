"""Catalog store.

Loads, validates and caches one immutable Catalog per (locale, domain).
Cached catalogs are replaced wholesale, never mutated, so a reader holding
a catalog always sees its plural table and entries from the same load.

Thread Safety:
    The cache is guarded by an RWLock. Parsing happens outside the lock;
    the write lock is held only to swap dictionary entries. Concurrent
    first loads of the same key may both parse, but only the first result
    is installed and every caller receives that same object.

Python 3.13+.
"""

from __future__ import annotations

import io
import logging
import struct
from typing import TYPE_CHECKING

from babel.support import Translations

from pluralexengine.core.rwlock import RWLock
from pluralexengine.diagnostics import CatalogNotFoundError, ErrorTemplate, MalformedCatalogError
from pluralexengine.enums import CatalogBackend
from pluralexengine.rules import RuleCompiler, RuleParser

from .config import CatalogConfig
from .document import parse_document
from .model import Catalog, DocumentCatalog, NativeCatalog
from .types import DomainName, LocaleCode

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from .loading import CatalogLoader

__all__ = ["CatalogStore"]

logger = logging.getLogger(__name__)


class CatalogStore:
    """Cache of validated catalogs keyed by (locale, domain).

    Example:
        >>> store = CatalogStore(PathCatalogLoader("locales/{locale}"))
        >>> catalog = store.load("fr_FR", "app")
        >>> store.load("fr_FR", "app") is catalog
        True
        >>> store.load("fr_FR", "app", force_reload=True) is catalog
        False
    """

    __slots__ = ("_cache", "_compiler", "_config", "_loader", "_lock")

    def __init__(
        self,
        loader: CatalogLoader,
        *,
        config: CatalogConfig | None = None,
        compiler: RuleCompiler | None = None,
    ) -> None:
        """Initialize store.

        Args:
            loader: Source of catalog bytes
            config: Backend and plural rule settings (default: CatalogConfig())
            compiler: Plural rule compiler (default: one honoring config.max_rule_length)
        """
        self._loader = loader
        self._config = config if config is not None else CatalogConfig()
        self._compiler = (
            compiler
            if compiler is not None
            else RuleCompiler(RuleParser(max_length=self._config.max_rule_length))
        )
        self._cache: dict[tuple[LocaleCode, DomainName], Catalog] = {}
        self._lock = RWLock()

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return f"CatalogStore(backend={self._config.backend!s}, cached={len(self)})"

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._cache)

    def __contains__(self, key: object) -> bool:
        with self._lock.read():
            return key in self._cache

    @property
    def config(self) -> CatalogConfig:
        """Backend and plural rule settings."""
        return self._config

    @property
    def compiler(self) -> RuleCompiler:
        """Compiler used for catalog headers."""
        return self._compiler

    @property
    def loader(self) -> CatalogLoader:
        """Source of catalog bytes."""
        return self._loader

    def get(self, locale: LocaleCode, domain: DomainName) -> Catalog | None:
        """Return the cached catalog, or None without loading."""
        with self._lock.read():
            return self._cache.get((locale, domain))

    def load(self, locale: LocaleCode, domain: DomainName, *, force_reload: bool = False) -> Catalog:
        """Return the catalog for (locale, domain), loading it on first use.

        Args:
            locale: Locale code
            domain: Domain name
            force_reload: Re-read and re-validate even when cached

        Returns:
            The cached catalog; the same object on repeated calls unless
            force_reload replaced it

        Raises:
            CatalogNotFoundError: If the catalog file does not exist, or the
                loader rejects the locale or domain as a path segment
            MalformedCatalogError: If the catalog cannot be parsed
            VariantCountMismatchError: If an entry has the wrong number of forms
            PluralRuleError: If the catalog's plural rule cannot be compiled
        """
        key = (locale, domain)
        if not force_reload:
            with self._lock.read():
                cached = self._cache.get(key)
            if cached is not None:
                logger.debug("Catalog cache hit: %s/%s", locale, domain)
                return cached

        catalog = self.build(locale, domain)

        with self._lock.write():
            if not force_reload:
                existing = self._cache.get(key)
                if existing is not None:
                    return existing
            self._cache[key] = catalog
        return catalog

    def reload(self, locale: LocaleCode, domain: DomainName) -> Catalog:
        """Re-read a catalog and atomically replace the cached one."""
        return self.load(locale, domain, force_reload=True)

    def build(self, locale: LocaleCode, domain: DomainName) -> Catalog:
        """Read and validate a catalog without touching the cache.

        Used to stage catalogs that must all succeed before any of them is
        installed, such as during a locale switch.

        Raises:
            CatalogNotFoundError: If the catalog file does not exist, or the
                loader rejects the locale or domain as a path segment
            MalformedCatalogError: If the catalog cannot be parsed
            VariantCountMismatchError: If an entry has the wrong number of forms
            PluralRuleError: If the catalog's plural rule cannot be compiled
        """
        match self._config.backend:
            case CatalogBackend.DOCUMENT:
                catalog: Catalog = self._build_document(locale, domain)
            case CatalogBackend.NATIVE:
                catalog = self._build_native(locale, domain)
        logger.info("Loaded %s catalog %s/%s", self._config.backend, locale, domain)
        return catalog

    def install(self, catalogs: Iterable[Catalog]) -> None:
        """Atomically install several catalogs, replacing cached ones.

        Readers observe either none or all of the new catalogs.
        """
        staged = {(catalog.locale, catalog.domain): catalog for catalog in catalogs}
        with self._lock.write():
            self._cache.update(staged)

    def evict(self, locale: LocaleCode, domain: DomainName | None = None) -> int:
        """Drop cached catalogs for a locale, or for one (locale, domain).

        Returns:
            Number of catalogs removed
        """
        with self._lock.write():
            keys = [
                key
                for key in self._cache
                if key[0] == locale and (domain is None or key[1] == domain)
            ]
            for key in keys:
                del self._cache[key]
        return len(keys)

    def loaded_keys(self) -> tuple[tuple[LocaleCode, DomainName], ...]:
        """Snapshot of cached (locale, domain) pairs in load order."""
        with self._lock.read():
            return tuple(self._cache)

    def _read[T](
        self,
        reader: Callable[[LocaleCode, DomainName], T],
        locale: LocaleCode,
        domain: DomainName,
        path: str,
    ) -> T:
        try:
            return reader(locale, domain)
        except FileNotFoundError as e:
            raise CatalogNotFoundError(ErrorTemplate.catalog_not_found(locale, domain, path)) from e
        except (OSError, UnicodeDecodeError) as e:
            raise MalformedCatalogError(ErrorTemplate.catalog_malformed(path, str(e))) from e
        except ValueError as e:
            # Loader rejected the locale or domain as a path segment.
            raise CatalogNotFoundError(
                ErrorTemplate.catalog_not_found(locale, domain, path, str(e))
            ) from e

    def _build_document(self, locale: LocaleCode, domain: DomainName) -> DocumentCatalog:
        path = self._loader.describe_path(locale, domain, CatalogBackend.DOCUMENT)
        source = self._read(self._loader.load_document, locale, domain, path)
        return parse_document(
            source,
            locale=locale,
            domain=domain,
            config=self._config,
            compiler=self._compiler,
            source_path=path,
        )

    def _build_native(self, locale: LocaleCode, domain: DomainName) -> NativeCatalog:
        path = self._loader.describe_path(locale, domain, CatalogBackend.NATIVE)
        data = self._read(self._loader.load_native, locale, domain, path)
        try:
            translations = Translations(io.BytesIO(data), domain=domain)
        except (OSError, ValueError, struct.error) as e:
            raise MalformedCatalogError(
                ErrorTemplate.catalog_malformed(path, f"invalid gettext catalog: {e}")
            ) from e
        return NativeCatalog(locale=locale, domain=domain, translations=translations, source_path=path)
