"""Hypothesis strategies for plural rule and catalog testing.

Provides strategies for well-formed rule expressions (as text), ternary
chains with a known form count, quantities and document catalog entries.
"""

from __future__ import annotations

from hypothesis import strategies as st
from hypothesis.strategies import composite

from pluralexengine.constants import RULE_ALPHABET

COMPARISONS = ["==", "!=", "<", "<=", ">", ">="]
COMBINATORS = ["&&", "||"]

# Every key a rule may contain plus whitespace
rule_characters = st.sampled_from(sorted(RULE_ALPHABET) + [" "])

# Quantities, including negatives (evaluated as their absolute value)
quantities = st.integers(min_value=-10**6, max_value=10**6)


@composite
def arithmetic_terms(draw: st.DrawFn) -> str:
    """Generate ``n``, a literal or ``n % k`` with non-zero k."""
    kind = draw(st.sampled_from(["n", "literal", "modulo"]))
    match kind:
        case "n":
            return "n"
        case "literal":
            return str(draw(st.integers(min_value=0, max_value=1000)))
        case _:
            return f"n % {draw(st.integers(min_value=1, max_value=1000))}"


@composite
def comparisons(draw: st.DrawFn) -> str:
    """Generate one comparison such as ``n % 10 != 1``."""
    left = draw(arithmetic_terms())
    op = draw(st.sampled_from(COMPARISONS))
    right = draw(st.integers(min_value=0, max_value=1000))
    return f"{left} {op} {right}"


@composite
def boolean_rules(draw: st.DrawFn, max_terms: int = 4) -> str:
    """Generate a boolean rule of comparisons joined by ``&&``/``||``.

    Some comparisons are parenthesized to exercise Grouping nodes.
    """
    count = draw(st.integers(min_value=1, max_value=max_terms))
    parts: list[str] = []
    for index in range(count):
        term = draw(comparisons())
        if draw(st.booleans()):
            term = f"({term})"
        if index:
            parts.append(draw(st.sampled_from(COMBINATORS)))
        parts.append(term)
    return " ".join(parts)


@composite
def plural_chains(draw: st.DrawFn, max_forms: int = 6) -> tuple[int, str]:
    """Generate ``(nplurals, chain)`` where the chain selects exactly nplurals forms.

    Row i selects form i and the fallback selects the last form.
    """
    nplurals = draw(st.integers(min_value=2, max_value=max_forms))
    segments = [f"{draw(boolean_rules(max_terms=2))} ? {index} : " for index in range(nplurals - 1)]
    return nplurals, "".join(segments) + str(nplurals - 1)


@composite
def translation_texts(draw: st.DrawFn) -> str:
    """Generate non-blank translation text without ``%`` placeholders."""
    text = draw(
        st.text(
            alphabet=st.characters(
                exclude_categories=("Cs", "Cc"),
                exclude_characters="%",
            ),
            min_size=1,
            max_size=30,
        ).filter(lambda value: value.strip())
    )
    return text


@composite
def document_entries(draw: st.DrawFn, nplurals: int = 2) -> dict[str, object]:
    """Generate document catalog entries: strings and nplurals-long lists."""
    keys = draw(
        st.lists(translation_texts(), min_size=1, max_size=8, unique=True)
    )
    entries: dict[str, object] = {}
    for key in keys:
        if draw(st.booleans()):
            entries[key] = draw(translation_texts())
        else:
            entries[key] = draw(
                st.lists(translation_texts(), min_size=nplurals, max_size=nplurals)
            )
    return entries
