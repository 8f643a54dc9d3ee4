"""Tests for the JSON document catalog codec and catalog model.

Covers header compilation in both syntaxes, variant validation, malformed
input, and the load-then-export round trip.
"""

from __future__ import annotations

import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from pluralexengine.catalog import (
    CatalogConfig,
    DocumentCatalog,
    Multi,
    Single,
    dump_document,
    parse_document,
)
from pluralexengine.diagnostics import (
    DiagnosticCode,
    InvalidCharactersError,
    MalformedCatalogError,
    MissingNPluralsError,
    VariantCountMismatchError,
)
from pluralexengine.enums import PluralRuleSyntax
from pluralexengine.rules import PluralTable, RuleCompiler
from tests.strategies import document_entries

FR_HEADER = {"nplurals": "2", "plural": "n > 1"}
RU_HEADER = {
    "plural-forms": (
        "nplurals=3; plural=(n%10==1 && n%100!=11 ? 0 : "
        "n%10>=2 && n%10<=4 && (n%100<10 || n%100>=20) ? 1 : 2);"
    )
}


def _parse(
    document: object,
    config: CatalogConfig | None = None,
    source_path: str | None = None,
) -> DocumentCatalog:
    text = document if isinstance(document, str) else json.dumps(document, ensure_ascii=False)
    return parse_document(
        text,
        locale="fr_FR",
        domain="app",
        config=config or CatalogConfig(),
        compiler=RuleCompiler(),
        source_path=source_path,
    )


# ============================================================================
# MODEL
# ============================================================================


class TestVariants:
    """Test Single and Multi variant sets."""

    def test_single_blank(self) -> None:
        """Empty and whitespace-only strings are blank."""
        assert Single("").is_blank
        assert Single("  \n").is_blank
        assert not Single("Bonjour").is_blank

    def test_multi_form(self) -> None:
        """form() returns the text at an index, or None when absent or blank."""
        variant = Multi(("un fichier", "", "fichiers"))

        assert variant.form(0) == "un fichier"
        assert variant.form(1) is None
        assert variant.form(2) == "fichiers"
        assert variant.form(3) is None
        assert variant.form(-1) is None


class TestDocumentCatalogModel:
    """Test the immutable document catalog."""

    def test_entries_are_read_only(self) -> None:
        """Entries and header cannot be mutated after load."""
        catalog = _parse({"": FR_HEADER, "Hello": "Bonjour"})

        with pytest.raises(TypeError):
            catalog.entries["Hello"] = Single("Salut")  # type: ignore[index]
        with pytest.raises(TypeError):
            catalog.header["nplurals"] = "3"  # type: ignore[index]

    def test_source_dicts_are_copied(self) -> None:
        """Mutating the dicts passed in does not affect the catalog."""
        entries = {"Hello": Single("Bonjour")}
        catalog = DocumentCatalog("fr_FR", "app", PluralTable(1), entries)
        entries["Bye"] = Single("Au revoir")

        assert "Bye" not in catalog

    def test_empty_catalog_is_truthy(self) -> None:
        """A catalog with no entries is still a loaded catalog."""
        catalog = _parse({"": FR_HEADER})

        assert catalog
        assert catalog.get("Hello") is None


# ============================================================================
# PARSING
# ============================================================================


class TestParseDocument:
    """Test parsing and validating document catalogs."""

    def test_entries_and_header(self) -> None:
        """Strings become Single, lists become Multi, the header is kept apart."""
        catalog = _parse(
            {
                "": FR_HEADER,
                "Hello": "Bonjour",
                "%d file": ["%d fichier", "%d fichiers"],
            }
        )

        assert catalog.get("Hello") == Single("Bonjour")
        assert catalog.get("%d file") == Multi(("%d fichier", "%d fichiers"))
        assert "" not in catalog
        assert dict(catalog.header) == FR_HEADER
        assert catalog.plural_table.select(0) == 0
        assert catalog.plural_table.select(2) == 1

    def test_chained_header(self) -> None:
        """Chained syntax reads the plural-forms field."""
        config = CatalogConfig(rule_syntax=PluralRuleSyntax.CHAINED)
        catalog = _parse({"": RU_HEADER, "%d file": ["%d файл", "%d файла", "%d файлов"]}, config)

        assert catalog.plural_table.nplurals == 3
        assert catalog.plural_table.select(22) == 1

    def test_custom_plural_forms_disabled(self) -> None:
        """With custom forms off, the header is ignored and two forms are required."""
        config = CatalogConfig(use_custom_plural_forms=False)
        catalog = _parse({"": {"nplurals": "3", "plural": "x"}, "f": ["a", "b"]}, config)

        assert catalog.plural_table == RuleCompiler().compile_default()
        with pytest.raises(VariantCountMismatchError):
            _parse({"": RU_HEADER, "f": ["a", "b", "c"]}, config)

    def test_custom_default_plural(self) -> None:
        """The configured default rule replaces n != 1."""
        config = CatalogConfig(use_custom_plural_forms=False, default_plural="n > 1")
        catalog = _parse({"f": ["a", "b"]}, config)

        assert catalog.plural_table.select(0) == 0

    @pytest.mark.parametrize("nplurals", ["0", "1"])
    def test_degenerate_requires_one_form(self, nplurals: str) -> None:
        """Degenerate catalogs have exactly one form per list entry."""
        catalog = _parse({"": {"nplurals": nplurals}, "f": ["一个文件"]})

        assert catalog.plural_table.is_degenerate
        with pytest.raises(VariantCountMismatchError):
            _parse({"": {"nplurals": nplurals}, "f": ["a", "b"]})

    @pytest.mark.parametrize("forms", [[], ["one"], ["one", "two", "three"]])
    def test_variant_count_mismatch(self, forms: list[str]) -> None:
        """Lists must have exactly nplurals strings."""
        with pytest.raises(VariantCountMismatchError) as exc_info:
            _parse({"": FR_HEADER, "f": forms}, source_path="locales/fr_FR/app.json")

        diagnostic = exc_info.value.diagnostic
        assert diagnostic is not None
        assert diagnostic.code == DiagnosticCode.VARIANT_COUNT_MISMATCH
        assert diagnostic.source_path == "locales/fr_FR/app.json"

    def test_non_ascii_preserved(self) -> None:
        """Unicode keys and values load unchanged."""
        catalog = _parse({"": FR_HEADER, "Zdravo": "Здраво, свете"})

        assert catalog.get("Zdravo") == Single("Здраво, свете")


class TestMalformedDocuments:
    """Test rejection of documents with the wrong shape."""

    @pytest.mark.parametrize(
        ("source", "detail"),
        [
            ("{not json", "invalid JSON"),
            ("[1, 2]", "top level must be an object"),
            ('"text"', "top level must be an object"),
            ('{"": ["nplurals"]}', "header must be an object"),
            ('{"": {"nplurals": "2", "plural": "n != 1"}, "k": 5}', "must be a string or a list"),
            ('{"": {"nplurals": "2", "plural": "n != 1"}, "k": ["a", 1]}', "must be a string"),
            ('{"": {"nplurals": "2", "plural": "n != 1"}, "k": null}', "must be a string"),
            ('{"": {"nplurals": "2", "plural": "n != 1"}, "k": {"a": "b"}}', "must be a string"),
        ],
    )
    def test_malformed(self, source: str, detail: str) -> None:
        """Each shape error raises MalformedCatalogError."""
        with pytest.raises(MalformedCatalogError, match=detail):
            _parse(source)

    def test_deeply_nested_json(self) -> None:
        """Nesting past the interpreter's recursion limit is a malformed document."""
        depth = 100_000
        source = '{"k": ' + "[" * depth + "]" * depth + "}"

        with pytest.raises(MalformedCatalogError, match="nests too deeply"):
            _parse(source)

    def test_malformed_names_path(self) -> None:
        """The diagnostic names the catalog file."""
        with pytest.raises(MalformedCatalogError) as exc_info:
            _parse("{", source_path="locales/fr_FR/app.json")

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.source_path == "locales/fr_FR/app.json"

    def test_missing_header_in_direct_mode(self) -> None:
        """A document without nplurals cannot be compiled in direct mode."""
        with pytest.raises(MissingNPluralsError) as exc_info:
            _parse({"Hello": "Bonjour"})

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.source_path == "fr_FR/app"

    def test_rule_error_attributed_to_file(self) -> None:
        """Plural rule errors carry the catalog path."""
        with pytest.raises(InvalidCharactersError) as exc_info:
            _parse(
                {"": {"nplurals": "2", "plural": "n != 1 or 1"}},
                source_path="locales/fr_FR/app.json",
            )

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.source_path == "locales/fr_FR/app.json"
        assert "locales/fr_FR/app.json" in str(exc_info.value)


# ============================================================================
# EXPORT
# ============================================================================


class TestDumpDocument:
    """Test exporting document catalogs as JSON."""

    def test_header_first(self) -> None:
        """The header pseudo-entry is the first key of the export."""
        catalog = _parse({"Hello": "Bonjour", "": FR_HEADER})

        exported = json.loads(dump_document(catalog))

        assert next(iter(exported)) == ""
        assert exported[""] == FR_HEADER

    def test_unicode_not_escaped(self) -> None:
        """Non-ASCII text is written as-is."""
        catalog = _parse({"": FR_HEADER, "Hi": "Здраво"})

        assert "Здраво" in dump_document(catalog)

    def test_round_trip(self) -> None:
        """Loading an export reproduces the key to variant mapping."""
        catalog = _parse(
            {"": FR_HEADER, "Hello": "Bonjour", "%d file": ["%d fichier", "%d fichiers"]}
        )

        reloaded = _parse(dump_document(catalog))

        assert dict(reloaded.entries) == dict(catalog.entries)
        assert dict(reloaded.header) == dict(catalog.header)
        assert reloaded.plural_table == catalog.plural_table

    @given(st.integers(min_value=1, max_value=4).flatmap(
        lambda k: st.tuples(st.just(k), document_entries(nplurals=k))
    ))
    def test_round_trip_property(self, data: tuple[int, dict[str, object]]) -> None:
        """Any valid document survives export and reload unchanged."""
        nplurals, entries = data
        rule = " : ".join(f"n == {i} ? {i}" for i in range(nplurals - 1))
        header: dict[str, object] = {"nplurals": str(nplurals)}
        if nplurals > 1:
            header["plural"] = f"{rule} : {nplurals - 1}"
        catalog = _parse({"": header, **entries})

        reloaded = _parse(dump_document(catalog))

        assert dict(reloaded.entries) == dict(catalog.entries)
        assert json.loads(dump_document(reloaded)) == {"": header, **entries}
