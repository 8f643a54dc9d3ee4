"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here, so exception constructors never
    build strings inline and tests can assert on diagnostic codes instead
    of message wording.
    """

    _RULE_HINT = "Rules may only use n, integer literals, parentheses and C operators"

    # ------------------------------------------------------------------
    # Plural rules
    # ------------------------------------------------------------------

    @staticmethod
    def invalid_characters(rule: str, invalid: str, position: int) -> Diagnostic:
        """Rule text contains characters outside the rule alphabet.

        Args:
            rule: The offending rule text
            invalid: The distinct invalid characters, in order of appearance
            position: Offset of the first invalid character

        Returns:
            Diagnostic for RULE_INVALID_CHARACTERS
        """
        msg = f"Plural rule contains invalid characters: {invalid!r}"
        return Diagnostic(
            code=DiagnosticCode.RULE_INVALID_CHARACTERS,
            message=msg,
            position=position,
            source_text=rule,
            hint=ErrorTemplate._RULE_HINT,
        )

    @staticmethod
    def rule_syntax(rule: str, detail: str, position: int | None = None) -> Diagnostic:
        """Rule text is not a single well-formed expression.

        Args:
            rule: The offending rule text
            detail: What the parser expected or found
            position: Offset where parsing failed

        Returns:
            Diagnostic for RULE_GRAMMAR
        """
        msg = f"Invalid plural rule: {detail}"
        return Diagnostic(
            code=DiagnosticCode.RULE_GRAMMAR,
            message=msg,
            position=position,
            source_text=rule,
            hint=ErrorTemplate._RULE_HINT,
        )

    @staticmethod
    def rule_too_long(length: int, max_length: int) -> Diagnostic:
        """Rule text exceeds the configured length limit.

        Args:
            length: Actual rule length
            max_length: Configured limit

        Returns:
            Diagnostic for RULE_TOO_LONG
        """
        msg = f"Plural rule is {length} characters long (limit: {max_length})"
        return Diagnostic(code=DiagnosticCode.RULE_TOO_LONG, message=msg)

    @staticmethod
    def depth_exceeded(max_depth: int) -> Diagnostic:
        """Rule nesting is deeper than the guard allows.

        Args:
            max_depth: Maximum allowed depth

        Returns:
            Diagnostic for RULE_DEPTH_EXCEEDED
        """
        msg = f"Plural rule nesting exceeds maximum depth ({max_depth})"
        return Diagnostic(
            code=DiagnosticCode.RULE_DEPTH_EXCEEDED,
            message=msg,
            hint="Remove redundant parentheses",
        )

    @staticmethod
    def modulo_by_zero(rule: str | None = None, n: int | None = None) -> Diagnostic:
        """Rule computes a remainder with a zero divisor.

        Args:
            rule: Rule text, when known
            n: Quantity being evaluated, None for static detection

        Returns:
            Diagnostic for RULE_EVALUATION_FAILED
        """
        msg = "Plural rule divides by zero" if n is None else f"Plural rule divides by zero for n={n}"
        return Diagnostic(
            code=DiagnosticCode.RULE_EVALUATION_FAILED,
            message=msg,
            source_text=rule,
        )

    @staticmethod
    def missing_nplurals(value: object = None) -> Diagnostic:
        """Header lacks a usable nplurals value.

        Args:
            value: The value found, None when the field is absent

        Returns:
            Diagnostic for RULE_MISSING_NPLURALS
        """
        if value is None:
            msg = "Plural rule header is missing a valid nplurals value"
        else:
            msg = f"Plural rule header has an invalid nplurals value: {value!r}"
        return Diagnostic(
            code=DiagnosticCode.RULE_MISSING_NPLURALS,
            message=msg,
            hint="Declare a non-negative integer, e.g. nplurals=2",
        )

    @staticmethod
    def missing_plural_expression(nplurals: int) -> Diagnostic:
        """Header declares several forms but no expression to choose them.

        Args:
            nplurals: Declared number of forms

        Returns:
            Diagnostic for RULE_MISSING_EXPRESSION
        """
        msg = f"Plural rule header declares {nplurals} forms but no plural expression"
        return Diagnostic(
            code=DiagnosticCode.RULE_MISSING_EXPRESSION,
            message=msg,
            hint="Add a plural expression, e.g. plural=(n != 1)",
        )

    @staticmethod
    def nplurals_mismatch(nplurals: int, decisions: int, rule: str) -> Diagnostic:
        """Declared form count disagrees with the ternary chain.

        Args:
            nplurals: Declared number of forms
            decisions: Number of ternary decision points found
            rule: The chain text

        Returns:
            Diagnostic for RULE_NPLURALS_MISMATCH
        """
        msg = (
            f"Plural rule declares nplurals={nplurals} but its chain selects "
            f"{decisions + 1} forms"
        )
        return Diagnostic(
            code=DiagnosticCode.RULE_NPLURALS_MISMATCH,
            message=msg,
            source_text=rule,
        )

    @staticmethod
    def variant_index_out_of_range(index: int, nplurals: int) -> Diagnostic:
        """A rule row selects a form the header does not declare.

        Args:
            index: The selected form index
            nplurals: Declared number of forms

        Returns:
            Diagnostic for RULE_NPLURALS_MISMATCH
        """
        msg = f"Plural rule selects form {index} but only {nplurals} forms are declared"
        return Diagnostic(code=DiagnosticCode.RULE_NPLURALS_MISMATCH, message=msg)

    # ------------------------------------------------------------------
    # Catalogs
    # ------------------------------------------------------------------

    @staticmethod
    def catalog_not_found(
        locale: str, domain: str, path: str, detail: str | None = None
    ) -> Diagnostic:
        """Catalog file does not exist, or the loader refused to look for it.

        Args:
            locale: Requested locale
            domain: Requested domain
            path: Where the catalog was expected
            detail: Why the loader rejected the locale or domain, if it did

        Returns:
            Diagnostic for CATALOG_NOT_FOUND
        """
        msg = f"No catalog for domain '{domain}' in locale '{locale}'"
        if detail:
            msg = f"{msg}: {detail}"
        return Diagnostic(
            code=DiagnosticCode.CATALOG_NOT_FOUND,
            message=msg,
            source_path=path,
        )

    @staticmethod
    def catalog_malformed(path: str, detail: str) -> Diagnostic:
        """Catalog file content has the wrong shape.

        Args:
            path: Catalog file
            detail: What was wrong

        Returns:
            Diagnostic for CATALOG_MALFORMED
        """
        msg = f"Malformed catalog: {detail}"
        return Diagnostic(
            code=DiagnosticCode.CATALOG_MALFORMED,
            message=msg,
            source_path=path,
        )

    @staticmethod
    def variant_count_mismatch(key: str, found: int, nplurals: int, path: str) -> Diagnostic:
        """Multi-variant entry has the wrong number of forms.

        Args:
            key: Entry key
            found: Number of forms present
            nplurals: Number of forms required
            path: Catalog file

        Returns:
            Diagnostic for VARIANT_COUNT_MISMATCH
        """
        msg = f"Entry {key!r} has {found} forms but the catalog declares nplurals={nplurals}"
        return Diagnostic(
            code=DiagnosticCode.VARIANT_COUNT_MISMATCH,
            message=msg,
            source_path=path,
            hint=f"Provide exactly {nplurals} strings for this entry",
        )

    @staticmethod
    def catalog_not_exportable(domain: str) -> Diagnostic:
        """Only document catalogs can be exported.

        Args:
            domain: Requested domain

        Returns:
            Diagnostic for CATALOG_NOT_EXPORTABLE
        """
        msg = f"Domain '{domain}' is backed by a native catalog and cannot be exported"
        return Diagnostic(code=DiagnosticCode.CATALOG_NOT_EXPORTABLE, message=msg)

    # ------------------------------------------------------------------
    # Locales and lookups
    # ------------------------------------------------------------------

    @staticmethod
    def unsupported_locale(lang: str, supported: tuple[str, ...]) -> Diagnostic:
        """Language key is not configured.

        Args:
            lang: Requested language key
            supported: Configured language keys

        Returns:
            Diagnostic for UNSUPPORTED_LOCALE
        """
        msg = f"Unsupported language '{lang}'"
        return Diagnostic(
            code=DiagnosticCode.UNSUPPORTED_LOCALE,
            message=msg,
            hint=f"Supported languages: {', '.join(supported)}",
        )

    @staticmethod
    def invalid_default_locale(lang: str, supported: tuple[str, ...]) -> Diagnostic:
        """Default language key is not configured.

        Args:
            lang: Configured default language key
            supported: Configured language keys

        Returns:
            Diagnostic for INVALID_DEFAULT_LOCALE
        """
        msg = f"Default language '{lang}' is not among the supported languages"
        return Diagnostic(
            code=DiagnosticCode.INVALID_DEFAULT_LOCALE,
            message=msg,
            hint=f"Supported languages: {', '.join(supported)}",
        )

    @staticmethod
    def invalid_quantity(value: object) -> Diagnostic:
        """Quantity is not an integer.

        Args:
            value: The rejected quantity

        Returns:
            Diagnostic for INVALID_QUANTITY
        """
        msg = f"Plural quantity must be an int, got {type(value).__name__}"
        return Diagnostic(
            code=DiagnosticCode.INVALID_QUANTITY,
            message=msg,
            hint="Round or convert the value explicitly before the lookup",
        )

    @staticmethod
    def placeholder_mismatch(text: str, count: int, detail: str) -> Diagnostic:
        """Positional values do not fit the translation's placeholders.

        Args:
            text: The selected translation
            count: Number of values supplied
            detail: Underlying formatting error

        Returns:
            Diagnostic for PLACEHOLDER_MISMATCH
        """
        msg = f"Cannot substitute {count} value(s) into {text!r}: {detail}"
        return Diagnostic(
            code=DiagnosticCode.PLACEHOLDER_MISMATCH,
            message=msg,
            hint="Check that the translation keeps the source's % placeholders",
        )
