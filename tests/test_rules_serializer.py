"""Tests for rendering rule ASTs and plural tables back to text."""

from __future__ import annotations

import pytest

from pluralexengine.rules import (
    PluralTable,
    RuleCompiler,
    Variable,
    parse_rule,
    serialize_rule,
    serialize_table,
)


class TestSerializeRule:
    """Test expression rendering."""

    @pytest.mark.parametrize(
        ("rule", "expected"),
        [
            ("n!=1", "n != 1"),
            ("n%10==1&&(n%100!=11)", "n % 10 == 1 && (n % 100 != 11)"),
            ("((n))", "((n))"),
            ("n<=4||n>=20", "n <= 4 || n >= 20"),
            ("7", "7"),
        ],
    )
    def test_normalized_spacing(self, rule: str, expected: str) -> None:
        """Operators are spaced and only the author's parentheses are kept."""
        assert serialize_rule(parse_rule(rule)) == expected

    def test_variable(self) -> None:
        """The variable renders as its name."""
        assert serialize_rule(Variable()) == "n"

    def test_unknown_node_rejected(self) -> None:
        """Objects that are not rule nodes are rejected."""
        with pytest.raises(TypeError, match="Unknown plural rule node"):
            serialize_rule("n")  # type: ignore[arg-type]


class TestSerializeTable:
    """Test rendering compiled tables as chained headers."""

    def test_boolean_table(self) -> None:
        """A single-row table renders as one ternary segment."""
        table = RuleCompiler().compile_direct(2, "n != 1")

        assert serialize_table(table) == "nplurals=2; plural=(n != 1) ? 1 : 0;"

    def test_chain_keeps_row_order(self) -> None:
        """Rows render in evaluation order followed by the fallback."""
        table = RuleCompiler().compile_chained(
            "nplurals=3; plural=n==1 ? 0 : (n%10>=2 && n%10<=4) ? 1 : 2;"
        )

        assert table.to_plural_forms() == (
            "nplurals=3; plural=(n == 1) ? 0 : (n % 10 >= 2 && n % 10 <= 4) ? 1 : 2;"
        )

    def test_degenerate_table(self) -> None:
        """Degenerate tables render as a constant rule."""
        assert serialize_table(PluralTable(1)) == "nplurals=1; plural=0;"

    def test_rendered_header_recompiles(self) -> None:
        """The rendered header compiles to an equal table."""
        compiler = RuleCompiler()
        table = compiler.compile_chained(
            "nplurals=4; plural=(n%100==1 ? 0 : n%100==2 ? 1 : n%100==3 || n%100==4 ? 2 : 3);"
        )

        assert compiler.compile_chained(table.to_plural_forms()) == table
