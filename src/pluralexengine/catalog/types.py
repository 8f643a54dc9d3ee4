"""Type aliases for the catalog domain.

Provides semantic type aliases used throughout the catalog and runtime
packages and by user code when annotating resolver call sites.

Python 3.13+. Zero external dependencies.
"""

__all__ = [
    "DocumentSource",
    "DomainName",
    "LangKey",
    "LocaleCode",
    "MessageKey",
]

type LangKey = str
"""Caller-facing language key (e.g., 'en', 'sr'), mapped to a LocaleCode."""

type LocaleCode = str
"""POSIX locale code naming a catalog directory (e.g., 'en_US', 'sr_RS')."""

type DomainName = str
"""Named partition of the catalog (e.g., 'messages', 'admin')."""

type MessageKey = str
"""Source-language message used as lookup key (e.g., 'Welcome, %s!')."""

type DocumentSource = str
"""Raw JSON text of a document catalog."""
