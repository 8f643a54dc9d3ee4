"""JSON document catalog parsing.

A document catalog is one JSON object per (locale, domain):

    {
        "": {"nplurals": "2", "plural": "n != 1"},
        "Welcome, %s!": "Bienvenue, %s !",
        "%d file": ["%d fichier", "%d fichiers"]
    }

The empty key holds the header. Every other key maps to a string (used for
any quantity) or a list holding exactly one string per plural form.

Python 3.13+.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping

from pluralexengine.constants import HEADER_KEY
from pluralexengine.diagnostics import (
    ErrorTemplate,
    MalformedCatalogError,
    PluralRuleError,
    VariantCountMismatchError,
)
from pluralexengine.rules import PluralTable, RuleCompiler

from .config import CatalogConfig
from .model import DocumentCatalog, Multi, Single, VariantSet
from .types import DocumentSource, DomainName, LocaleCode, MessageKey

__all__ = ["dump_document", "parse_document"]

logger = logging.getLogger(__name__)


def parse_document(
    source: DocumentSource,
    *,
    locale: LocaleCode,
    domain: DomainName,
    config: CatalogConfig,
    compiler: RuleCompiler,
    source_path: str | None = None,
) -> DocumentCatalog:
    """Parse and validate JSON document text into a DocumentCatalog.

    Args:
        source: JSON text
        locale: Locale the document belongs to
        domain: Domain the document belongs to
        config: Rule syntax and custom plural form settings
        compiler: Compiler for the header's plural rule
        source_path: File the text was read from, for diagnostics

    Returns:
        Immutable catalog with compiled plural table

    Raises:
        MalformedCatalogError: If the JSON is invalid or has the wrong shape
        PluralRuleError: If the header's plural rule cannot be compiled
        VariantCountMismatchError: If a list entry does not have nplurals forms
    """
    path = source_path or f"{locale}/{domain}"
    try:
        data = json.loads(source)
    except json.JSONDecodeError as e:
        detail = f"invalid JSON at line {e.lineno}, column {e.colno}: {e.msg}"
        raise MalformedCatalogError(ErrorTemplate.catalog_malformed(path, detail)) from e
    except RecursionError as e:
        detail = "invalid JSON: document nests too deeply"
        raise MalformedCatalogError(ErrorTemplate.catalog_malformed(path, detail)) from e

    if not isinstance(data, dict):
        detail = f"top level must be an object, got {type(data).__name__}"
        raise MalformedCatalogError(ErrorTemplate.catalog_malformed(path, detail))

    header = data.get(HEADER_KEY, {})
    if not isinstance(header, dict):
        detail = f"header must be an object, got {type(header).__name__}"
        raise MalformedCatalogError(ErrorTemplate.catalog_malformed(path, detail))

    table = _compile_table(header, config, compiler, path)
    entries = {
        key: _to_variant(key, value, table, path)
        for key, value in data.items()
        if key != HEADER_KEY
    }

    logger.debug(
        "Parsed document catalog %s: %d entries, nplurals=%d", path, len(entries), table.nplurals
    )
    return DocumentCatalog(
        locale=locale,
        domain=domain,
        plural_table=table,
        entries=entries,
        header=header,
        source_path=source_path,
    )


def dump_document(catalog: DocumentCatalog) -> DocumentSource:
    """Serialize a document catalog back to JSON text.

    The output parses back to a catalog with the same header and the same
    key to variant mapping.
    """
    return json.dumps(catalog.to_document(), ensure_ascii=False, indent=2)


def _compile_table(
    header: Mapping[str, object],
    config: CatalogConfig,
    compiler: RuleCompiler,
    path: str,
) -> PluralTable:
    if not config.use_custom_plural_forms:
        return compiler.compile_default(config.default_plural)
    try:
        return compiler.compile_header(header, config.rule_syntax)
    except PluralRuleError as e:
        if e.diagnostic is None or e.diagnostic.source_path:
            raise
        raise type(e)(e.diagnostic.with_source_path(path)) from e


def _to_variant(key: MessageKey, value: object, table: PluralTable, path: str) -> VariantSet:
    match value:
        case str():
            return Single(value)
        case list() if all(isinstance(form, str) for form in value):
            # Degenerate tables still index form 0.
            expected = max(table.nplurals, 1)
            if len(value) != expected:
                raise VariantCountMismatchError(
                    ErrorTemplate.variant_count_mismatch(key, len(value), expected, path)
                )
            return Multi(tuple(value))
        case _:
            detail = f"entry {key!r} must be a string or a list of strings"
            raise MalformedCatalogError(ErrorTemplate.catalog_malformed(path, detail))
