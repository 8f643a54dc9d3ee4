"""PluraLexEngine - gettext-style message lookup with a safe plural-rule engine.

Resolves a message key and a quantity to the correct localized form, from
JSON document catalogs or compiled gettext catalogs. Plural rules are
compiled from catalog headers into tables evaluated by a restricted,
side-effect-free interpreter; no rule text is ever passed to eval.

Public API:
    TranslationResolver - Key and quantity lookup for a current locale
    CatalogStore - Cache of validated catalogs keyed by (locale, domain)
    CatalogConfig - Backend and plural rule settings
    PathCatalogLoader - Filesystem catalog loader
    RuleCompiler - Catalog header to PluralTable
    parse_rule - Parse a plural rule expression to AST
    plural_forms_for_locale - CLDR plural header for a locale (via Babel)

Exceptions:
    PluralexError - Base exception class
    PluralRuleError - Plural rule cannot be compiled
    CatalogError - Catalog cannot be found, parsed or validated
    UnsupportedLocaleError - Language key is not configured
    PlaceholderError - Positional values do not fit a translation

Submodules:
    pluralexengine.rules - Grammar, parser, evaluator, compiler, serializer
    pluralexengine.catalog - Catalog model, loaders and store
    pluralexengine.runtime - Resolver and missing translation log
    pluralexengine.diagnostics - Error types, codes and formatting
"""

# Essential Public API - Minimal exports for clean namespace
from .catalog import CatalogConfig, CatalogStore, PathCatalogLoader
from .diagnostics import (
    CatalogError,
    PlaceholderError,
    PluralexError,
    PluralRuleError,
    UnsupportedLocaleError,
)
from .enums import CatalogBackend, PluralRuleSyntax
from .locale_utils import plural_forms_for_locale
from .rules import PluralTable, RuleCompiler, parse_rule
from .runtime import TranslationResolver

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError  # noqa: E402
from importlib.metadata import version as _get_version  # noqa: E402

try:
    __version__ = _get_version("pluralexengine")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "CatalogBackend",
    "CatalogConfig",
    "CatalogError",
    "CatalogStore",
    "PathCatalogLoader",
    "PlaceholderError",
    "PluralRuleError",
    "PluralRuleSyntax",
    "PluralTable",
    "PluralexError",
    "RuleCompiler",
    "TranslationResolver",
    "UnsupportedLocaleError",
    "__version__",
    "parse_rule",
    "plural_forms_for_locale",
]
