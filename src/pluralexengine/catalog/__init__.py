"""Catalog model, loading and caching.

Public API:
    CatalogStore - Cache of validated catalogs keyed by (locale, domain)
    CatalogConfig - Backend and plural rule settings
    CatalogLoader, PathCatalogLoader - Where catalog files come from
    DocumentCatalog, NativeCatalog - Loaded catalogs
    Single, Multi - Entry variants of a document catalog
    parse_document, dump_document - JSON document codec

Python 3.13+.
"""

from .config import CatalogConfig
from .document import dump_document, parse_document
from .loading import CatalogLoader, CatalogLoadResult, LoadSummary, PathCatalogLoader
from .model import Catalog, DocumentCatalog, Multi, NativeCatalog, Single, VariantSet
from .store import CatalogStore
from .types import DocumentSource, DomainName, LangKey, LocaleCode, MessageKey

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Store and configuration
    "CatalogStore",
    "CatalogConfig",
    # Loading
    "CatalogLoader",
    "PathCatalogLoader",
    "CatalogLoadResult",
    "LoadSummary",
    # Model
    "Catalog",
    "DocumentCatalog",
    "NativeCatalog",
    "Single",
    "Multi",
    "VariantSet",
    # Document codec
    "parse_document",
    "dump_document",
    # Type aliases
    "DocumentSource",
    "DomainName",
    "LangKey",
    "LocaleCode",
    "MessageKey",
]
