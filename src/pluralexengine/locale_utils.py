"""Locale utilities.

Centralizes locale code validation and normalization used by the catalog
loader and the resolver, plus the Babel bridge that produces gettext
plural headers from CLDR data.

Python 3.13+.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "get_babel_locale",
    "normalize_locale",
    "plural_forms_for_locale",
    "to_html_lang",
    "validate_locale_code",
]


def normalize_locale(locale_code: str) -> str:
    """Convert a BCP-47 locale code to POSIX format.

    Catalog directories and Babel both use underscores (``en_US``), while
    configuration often arrives hyphenated (``en-US``).

    Example:
        >>> normalize_locale("pt-BR")
        'pt_BR'
        >>> normalize_locale("en")
        'en'
    """
    return locale_code.replace("-", "_")


def validate_locale_code(locale_code: str) -> None:
    """Validate locale code format.

    Checks that the code is non-empty and contains only alphanumeric
    characters with optional underscore or hyphen separators. Anything
    else could not name a catalog directory safely.

    Args:
        locale_code: Locale code to validate

    Raises:
        ValueError: If the code is empty or has invalid format
    """
    if not locale_code:
        msg = "Locale code cannot be empty"
        raise ValueError(msg)
    if not locale_code.replace("_", "").replace("-", "").isalnum() or not locale_code.isascii():
        msg = f"Invalid locale code format: '{locale_code}'"
        raise ValueError(msg)


def to_html_lang(locale_code: str) -> str:
    """Convert a POSIX locale code to a value for the HTML ``lang`` attribute.

    Example:
        >>> to_html_lang("en_US")
        'en-us'
    """
    return locale_code.replace("_", "-").lower()


@functools.lru_cache(maxsize=128)
def get_babel_locale(locale_code: str) -> Locale:
    """Get a Babel Locale object with caching.

    Args:
        locale_code: Locale code (BCP-47 or POSIX format accepted)

    Returns:
        Babel Locale object

    Raises:
        babel.core.UnknownLocaleError: If locale is not recognized
        ValueError: If locale format is invalid
    """
    # Lazy import: Babel loads CLDR data at import time; defer until needed
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(normalize_locale(locale_code))


@functools.lru_cache(maxsize=128)
def plural_forms_for_locale(locale_code: str) -> str:
    """Return the gettext ``plural-forms`` header value for a locale.

    The value comes from Babel's plural table and is ready for
    ``RuleCompiler.compile_chained`` or a document catalog header.

    Args:
        locale_code: Locale code (BCP-47 or POSIX format accepted)

    Returns:
        Header value such as ``nplurals=2; plural=(n > 1);``

    Raises:
        babel.core.UnknownLocaleError: If locale is not recognized

    Example:
        >>> plural_forms_for_locale("fr_FR")
        'nplurals=2; plural=(n > 1);'
    """
    from babel.messages.plurals import get_plural  # noqa: PLC0415

    return get_plural(get_babel_locale(locale_code)).plural_forms
