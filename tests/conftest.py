"""Pytest configuration for PluraLexEngine test suite.

Single Source of Truth for Hypothesis max_examples:
- dev: Local development with 500 examples (thorough property testing)
- ci: GitHub Actions with 50 examples (fast CI feedback)
- verbose: Debug mode with progress output (100 examples)

Profile auto-detection:
- CI=true environment variable -> "ci" profile (GitHub Actions sets this)
- HYPOTHESIS_PROFILE env var -> explicit override
- Otherwise -> "dev" profile (local development)

Override manually: HYPOTHESIS_PROFILE=verbose pytest tests/

Fuzzing Test Separation:
Tests marked with @pytest.mark.fuzz are excluded from normal test runs.
Run them via: pytest -m fuzz

Catalog Fixtures:
write_document and write_native create catalogs under a temporary
``locales/{locale}/`` tree; native catalogs are compiled with Babel.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

import pytest
from babel.messages.catalog import Catalog
from babel.messages.mofile import write_mo
from hypothesis import Phase, Verbosity, settings

# =============================================================================
# HYPOTHESIS PROFILES - SINGLE SOURCE OF TRUTH
# =============================================================================

# Development profile: thorough local testing (500 examples, silent)
settings.register_profile(
    "dev",
    max_examples=500,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
)

# CI profile: fast feedback for GitHub Actions (50 examples)
settings.register_profile(
    "ci",
    max_examples=50,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=True,
    print_blob=True,
)

# Verbose profile: debug mode with progress visibility (100 examples)
settings.register_profile(
    "verbose",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
    verbosity=Verbosity.verbose,
)


# =============================================================================
# AUTO-DETECT EXECUTION CONTEXT
# =============================================================================


def _detect_profile() -> str:
    """Detect appropriate Hypothesis profile based on execution context.

    Priority:
    1. HYPOTHESIS_PROFILE env var (explicit override)
    2. CI=true env var (GitHub Actions auto-detection)
    3. Default to "dev" (local development)
    """
    import os

    explicit = os.environ.get("HYPOTHESIS_PROFILE")
    if explicit in ("dev", "ci", "verbose"):
        return explicit

    if os.environ.get("CI") == "true":
        return "ci"

    return "dev"


settings.load_profile(_detect_profile())


# =============================================================================
# FUZZING TEST SEPARATION
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register the 'fuzz' marker for intensive property tests."""
    config.addinivalue_line(
        "markers",
        "fuzz: Intensive property tests for fuzzing (excluded from normal test runs)",
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Skip fuzz-marked tests unless explicitly requested.

    Behavior:
    - Normal test run (pytest tests/): Fuzz tests are SKIPPED
    - Explicit fuzz run (pytest -m fuzz): Fuzz tests run, others skipped
    """
    marker_expr = config.getoption("-m", default="")
    if "fuzz" in str(marker_expr):
        return

    skip_fuzz = pytest.mark.skip(reason="Fuzzing test - run with: pytest -m fuzz")
    for item in items:
        if "fuzz" in item.keywords:
            item.add_marker(skip_fuzz)


# =============================================================================
# CATALOG FIXTURES
# =============================================================================

type WriteDocument = Callable[[str, str, object], Path]
type WriteNative = Callable[..., Path]


@pytest.fixture
def locales_dir(tmp_path: Path) -> Path:
    """Empty ``locales`` directory under the test's temporary path."""
    path = tmp_path / "locales"
    path.mkdir()
    return path


@pytest.fixture
def write_document(locales_dir: Path) -> WriteDocument:
    """Factory writing ``locales/{locale}/{domain}.json``.

    Strings are written verbatim (for malformed JSON tests); anything else
    is serialized with json.dumps.
    """

    def _write(locale: str, domain: str, content: object) -> Path:
        directory = locales_dir / locale
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{domain}.json"
        text = content if isinstance(content, str) else json.dumps(content, ensure_ascii=False)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_native(locales_dir: Path) -> WriteNative:
    """Factory compiling ``locales/{locale}/LC_MESSAGES/{domain}.mo`` with Babel.

    Messages map a msgid to its translation; a tuple msgid (singular,
    plural) maps to a tuple of forms.
    """

    def _write(
        locale: str,
        domain: str,
        messages: Mapping[str | tuple[str, str], str | Sequence[str]],
    ) -> Path:
        catalog = Catalog(locale=locale, domain=domain)
        for msgid, translation in messages.items():
            string = translation if isinstance(translation, str) else tuple(translation)
            catalog.add(msgid, string)

        directory = locales_dir / locale / "LC_MESSAGES"
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{domain}.mo"
        with path.open("wb") as f:
            write_mo(f, catalog)
        return path

    return _write
