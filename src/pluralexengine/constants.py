"""Shared constants for PluraLexEngine.

Centralizes limits and fixed vocabularies used across the rules, catalog
and runtime packages. Keeping them here avoids circular imports between
the compiler and the catalog loader.

Constants are grouped by domain:
- Rule grammar: the closed alphabet accepted by the plural-rule parser
- Input limits: size and depth bounds for untrusted rule text
- Catalog layout: header key, default rule and file naming

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Rule grammar
    "RULE_ALPHABET",
    "RULE_VARIABLE",
    # Input limits
    "MAX_DEPTH",
    "MAX_RULE_LENGTH",
    "NPLURALS_RELAXED_COUNT",
    "MAX_LOAD_RESULTS",
    # Catalog layout
    "HEADER_KEY",
    "DEFAULT_PLURAL_RULE",
    "DEFAULT_NPLURALS",
    "DOCUMENT_SUFFIX",
    "NATIVE_SUFFIX",
    "NATIVE_SUBDIRECTORY",
]

# ============================================================================
# RULE GRAMMAR
# ============================================================================

# Every character a plural rule may contain, whitespace excluded.
# Checked before tokenization so that nothing outside this set ever
# reaches the parser or the evaluator.
RULE_ALPHABET: frozenset[str] = frozenset("()%=&|!?:<>0123456789n")

# The single integer variable a rule may reference.
RULE_VARIABLE: str = "n"

# ============================================================================
# INPUT LIMITS
# ============================================================================

# Maximum parenthesis nesting for parsing and evaluation (shared limit).
MAX_DEPTH: int = 100

# Longest rule text accepted by the parser, in characters.
# Real-world gettext rules (Arabic is the longest) stay well below 200.
MAX_RULE_LENGTH: int = 1024

# Chained rules declaring this many forms skip the decision-count check.
# Historical gettext headers for two-form languages write a bare boolean
# test or a single ternary, and both are accepted.
NPLURALS_RELAXED_COUNT: int = 2

# Catalog load attempts a resolver keeps for get_load_summary(); oldest
# results are dropped first.
MAX_LOAD_RESULTS: int = 256

# ============================================================================
# CATALOG LAYOUT
# ============================================================================

# Document catalogs carry their metadata under the empty key.
HEADER_KEY: str = ""

# Two-way rule used when a catalog cannot be loaded or custom plural
# forms are disabled. True selects the plural key.
DEFAULT_PLURAL_RULE: str = "n != 1"
DEFAULT_NPLURALS: int = 2

DOCUMENT_SUFFIX: str = ".json"
NATIVE_SUFFIX: str = ".mo"
NATIVE_SUBDIRECTORY: str = "LC_MESSAGES"
