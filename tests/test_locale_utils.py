"""Tests for locale_utils.py.

Covers locale code normalization and validation, HTML lang formatting and
the Babel bridge producing gettext plural headers.

Python 3.13+.
"""

from __future__ import annotations

import pytest
from babel import Locale, UnknownLocaleError
from hypothesis import given
from hypothesis import strategies as st

from pluralexengine.locale_utils import (
    get_babel_locale,
    normalize_locale,
    plural_forms_for_locale,
    to_html_lang,
    validate_locale_code,
)
from pluralexengine.rules import RuleCompiler


class TestNormalizeLocale:
    """Test normalize_locale function."""

    @pytest.mark.parametrize(
        ("code", "expected"),
        [("en-US", "en_US"), ("en_US", "en_US"), ("en", "en"), ("zh-Hans-CN", "zh_Hans_CN")],
    )
    def test_hyphens_to_underscores(self, code: str, expected: str) -> None:
        """BCP-47 separators become POSIX separators; case is kept."""
        assert normalize_locale(code) == expected

    @given(st.text(alphabet="abcXYZ_-", max_size=12))
    def test_idempotent(self, code: str) -> None:
        """Normalizing twice changes nothing."""
        assert normalize_locale(normalize_locale(code)) == normalize_locale(code)


class TestValidateLocaleCode:
    """Test validate_locale_code function."""

    @pytest.mark.parametrize("code", ["en", "en_US", "pt-BR", "zh_Hans_CN", "es_419"])
    def test_valid(self, code: str) -> None:
        """Alphanumeric codes with separators pass."""
        validate_locale_code(code)

    @pytest.mark.parametrize("code", ["en US", "en/US", "../en", "en.UTF-8", "ru_РУ"])
    def test_invalid_format(self, code: str) -> None:
        """Anything that could not name a directory safely is rejected."""
        with pytest.raises(ValueError, match="Invalid locale code format"):
            validate_locale_code(code)

    def test_empty(self) -> None:
        """Empty codes are rejected."""
        with pytest.raises(ValueError, match="cannot be empty"):
            validate_locale_code("")


class TestToHtmlLang:
    """Test to_html_lang function."""

    @pytest.mark.parametrize(
        ("code", "expected"), [("en_US", "en-us"), ("fr", "fr"), ("sr_Latn_RS", "sr-latn-rs")]
    )
    def test_format(self, code: str, expected: str) -> None:
        """Underscores become hyphens and the result is lowercase."""
        assert to_html_lang(code) == expected


class TestBabelBridge:
    """Test the CLDR lookups delegated to Babel."""

    def test_get_babel_locale(self) -> None:
        """BCP-47 and POSIX codes resolve to the same Babel locale."""
        locale = get_babel_locale("pt-BR")

        assert isinstance(locale, Locale)
        assert locale.territory == "BR"
        assert get_babel_locale("pt_BR") == locale

    def test_unknown_locale(self) -> None:
        """Codes unknown to CLDR raise Babel's error."""
        with pytest.raises(UnknownLocaleError):
            get_babel_locale("xx_XX")

    @pytest.mark.parametrize(
        ("code", "nplurals"), [("en_US", 2), ("fr_FR", 2), ("ru_RU", 3), ("ja_JP", 1)]
    )
    def test_plural_forms(self, code: str, nplurals: int) -> None:
        """The header declares the CLDR number of forms and compiles."""
        header = plural_forms_for_locale(code)

        assert header.startswith(f"nplurals={nplurals};")
        assert RuleCompiler().compile_chained(header).nplurals == nplurals
