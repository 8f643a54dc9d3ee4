"""Catalog loading infrastructure.

Provides the protocol for catalog loaders, a filesystem implementation
with path-traversal security, and result/summary data structures for
tracking load attempts.

Components:
    CatalogLoader - Protocol for reading catalog bytes (structural typing)
    PathCatalogLoader - Disk-based loader with path-traversal prevention
    CatalogLoadResult - Immutable result of a single catalog load attempt
    LoadSummary - Immutable aggregate of load results

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from pluralexengine.constants import DOCUMENT_SUFFIX, NATIVE_SUBDIRECTORY, NATIVE_SUFFIX
from pluralexengine.enums import CatalogBackend, LoadStatus

from .types import DocumentSource, DomainName, LocaleCode

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Protocol
    "CatalogLoader",
    # Concrete loader
    "PathCatalogLoader",
    # Load result types
    "CatalogLoadResult",
    "LoadSummary",
]


class CatalogLoader(Protocol):
    """Protocol for reading catalogs for a (locale, domain).

    Implementations raise FileNotFoundError when the catalog does not
    exist; the store turns that into CatalogNotFoundError. Any other
    OSError is reported as a malformed catalog.

    Example:
        >>> class MemoryLoader:
        ...     def __init__(self, documents: dict[tuple[str, str], str]) -> None:
        ...         self._documents = documents
        ...     def load_document(self, locale: str, domain: str) -> str:
        ...         try:
        ...             return self._documents[locale, domain]
        ...         except KeyError:
        ...             raise FileNotFoundError(f"{locale}/{domain}") from None
        ...     def load_native(self, locale: str, domain: str) -> bytes:
        ...         raise FileNotFoundError(f"{locale}/{domain}")
        ...     def describe_path(self, locale: str, domain: str, backend: CatalogBackend) -> str:
        ...         return f"memory:{locale}/{domain}"
    """

    def load_document(self, locale: LocaleCode, domain: DomainName) -> DocumentSource:
        """Return the JSON text of a document catalog.

        Raises:
            FileNotFoundError: If no document exists for this locale and domain
            OSError: If the document cannot be read
        """
        ...

    def load_native(self, locale: LocaleCode, domain: DomainName) -> bytes:
        """Return the bytes of a compiled gettext catalog.

        Raises:
            FileNotFoundError: If no .mo file exists for this locale and domain
            OSError: If the file cannot be read
        """
        ...

    def describe_path(self, locale: LocaleCode, domain: DomainName, backend: CatalogBackend) -> str:
        """Return human-readable path for diagnostics."""
        ...


@dataclass(frozen=True, slots=True)
class PathCatalogLoader:
    """File system catalog loader using path templates.

    Uses a {locale} placeholder in the path template for locale
    substitution. Document catalogs live directly in the locale directory,
    native catalogs in its LC_MESSAGES subdirectory:

        locales/{locale}/{domain}.json
        locales/{locale}/LC_MESSAGES/{domain}.mo

    Security:
        Locale codes and domain names containing path separators or ".."
        are rejected. All resolved paths are validated against a fixed root
        directory.

    Example:
        >>> loader = PathCatalogLoader("locales/{locale}")
        >>> loader.describe_path("fr_FR", "app", CatalogBackend.NATIVE)
        'locales/fr_FR/LC_MESSAGES/app.mo'

    Attributes:
        base_path: Path template with {locale} placeholder
        root_dir: Fixed root directory for path traversal validation.
                  Defaults to the static prefix of base_path.
    """

    base_path: str
    root_dir: str | None = None
    _resolved_root: Path = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Cache resolved root directory and validate template at initialization.

        Raises:
            ValueError: If base_path does not contain {locale} placeholder
        """
        if "{locale}" not in self.base_path:
            msg = (
                f"base_path must contain '{{locale}}' placeholder for locale substitution, "
                f"got: '{self.base_path}'"
            )
            raise ValueError(msg)

        if self.root_dir is not None:
            resolved = Path(self.root_dir).resolve()
        else:
            static_prefix = self.base_path.split("{locale}")[0].rstrip("/\\")
            resolved = Path(static_prefix).resolve() if static_prefix else Path.cwd().resolve()
        object.__setattr__(self, "_resolved_root", resolved)

    @staticmethod
    def _validate_segment(kind: str, value: str) -> None:
        """Reject locale codes and domain names that could escape the root.

        Raises:
            ValueError: If value is empty, padded, or contains path components
        """
        if not value:
            msg = f"{kind} cannot be empty"
            raise ValueError(msg)
        if value.strip() != value:
            msg = f"{kind} contains leading/trailing whitespace: {value!r}"
            raise ValueError(msg)
        if ".." in value:
            msg = f"Path traversal sequences not allowed in {kind.lower()}: '{value}'"
            raise ValueError(msg)
        if "/" in value or "\\" in value or "\x00" in value:
            msg = f"Path separators not allowed in {kind.lower()}: '{value}'"
            raise ValueError(msg)

    def _relative_path(self, domain: DomainName, backend: CatalogBackend) -> str:
        match backend:
            case CatalogBackend.DOCUMENT:
                return f"{domain}{DOCUMENT_SUFFIX}"
            case CatalogBackend.NATIVE:
                return f"{NATIVE_SUBDIRECTORY}/{domain}{NATIVE_SUFFIX}"

    def _resolve(self, locale: LocaleCode, domain: DomainName, backend: CatalogBackend) -> Path:
        self._validate_segment("Locale code", locale)
        self._validate_segment("Domain", domain)

        # replace() rather than format(): the template may contain other braces
        base_dir = Path(self.base_path.replace("{locale}", locale))
        full_path = (base_dir / self._relative_path(domain, backend)).resolve()

        try:
            full_path.relative_to(self._resolved_root)
        except ValueError:
            msg = (
                f"Path traversal detected: resolved path escapes root directory. "
                f"locale='{locale}', domain='{domain}'"
            )
            raise ValueError(msg) from None
        return full_path

    def describe_path(self, locale: LocaleCode, domain: DomainName, backend: CatalogBackend) -> str:
        """Return human-readable path for diagnostics.

        Args:
            locale: Locale code
            domain: Domain name
            backend: Which catalog file to describe

        Returns:
            Template-substituted path string
        """
        locale_path = self.base_path.replace("{locale}", locale)
        return f"{locale_path}/{self._relative_path(domain, backend)}"

    def load_document(self, locale: LocaleCode, domain: DomainName) -> DocumentSource:
        """Read a JSON document catalog from disk.

        Raises:
            ValueError: If locale or domain contains path traversal sequences
            FileNotFoundError: If file doesn't exist
            OSError: If file cannot be read
        """
        return self._resolve(locale, domain, CatalogBackend.DOCUMENT).read_text(encoding="utf-8")

    def load_native(self, locale: LocaleCode, domain: DomainName) -> bytes:
        """Read a compiled gettext catalog from disk.

        Raises:
            ValueError: If locale or domain contains path traversal sequences
            FileNotFoundError: If file doesn't exist
            OSError: If file cannot be read
        """
        return self._resolve(locale, domain, CatalogBackend.NATIVE).read_bytes()


@dataclass(frozen=True, slots=True)
class CatalogLoadResult:
    """Result of loading a single catalog.

    Attributes:
        locale: Locale code the load was attempted for
        domain: Domain name the load was attempted for
        status: Load status (success, not_found, error)
        error: Exception if status is not SUCCESS, None otherwise
        source_path: Human-readable path to the catalog (if available)
    """

    locale: LocaleCode
    domain: DomainName
    status: LoadStatus
    error: Exception | None = None
    source_path: str | None = None

    @property
    def is_success(self) -> bool:
        """Check if catalog loaded successfully."""
        return self.status == LoadStatus.SUCCESS

    @property
    def is_not_found(self) -> bool:
        """Check if catalog was not found."""
        return self.status == LoadStatus.NOT_FOUND

    @property
    def is_error(self) -> bool:
        """Check if catalog load failed with an error."""
        return self.status == LoadStatus.ERROR


@dataclass(frozen=True, slots=True)
class LoadSummary:
    """Immutable aggregate of catalog load results.

    All statistics are computed properties derived from the ``results``
    tuple.

    Attributes:
        results: All individual load results, oldest first

    Example:
        >>> summary = resolver.get_load_summary()
        >>> for result in summary.get_errors():
        ...     print(f"Failed: {result.source_path}: {result.error}")
    """

    results: tuple[CatalogLoadResult, ...]

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return (
            f"LoadSummary(total={self.total_attempted}, "
            f"ok={self.successful}, "
            f"not_found={self.not_found}, "
            f"errors={self.errors})"
        )

    @property
    def total_attempted(self) -> int:
        """Total number of load attempts."""
        return len(self.results)

    @property
    def successful(self) -> int:
        """Number of successful loads."""
        return sum(1 for r in self.results if r.is_success)

    @property
    def not_found(self) -> int:
        """Number of catalogs not found."""
        return sum(1 for r in self.results if r.is_not_found)

    @property
    def errors(self) -> int:
        """Number of load errors."""
        return sum(1 for r in self.results if r.is_error)

    @property
    def all_successful(self) -> bool:
        """True when every attempted load succeeded."""
        return all(r.is_success for r in self.results)

    def get_errors(self) -> tuple[CatalogLoadResult, ...]:
        """Results with status ERROR."""
        return tuple(r for r in self.results if r.is_error)

    def get_not_found(self) -> tuple[CatalogLoadResult, ...]:
        """Results with status NOT_FOUND."""
        return tuple(r for r in self.results if r.is_not_found)

    def get_by_domain(self, domain: DomainName) -> tuple[CatalogLoadResult, ...]:
        """Results for one domain, across locales."""
        return tuple(r for r in self.results if r.domain == domain)
