"""Diagnostic formatting service.

Centralizes diagnostic output formatting with configurable options.
Python 3.13+. Zero external dependencies.
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from .codes import Diagnostic

__all__ = [
    "DiagnosticFormatter",
    "OutputFormat",
]


class OutputFormat(StrEnum):
    """Output format options for diagnostic formatting."""

    RUST = "rust"  # Compiler-style multi-line output (default)
    SIMPLE = "simple"  # Single-line format
    JSON = "json"  # JSON format for tooling integration


@dataclass(frozen=True, slots=True)
class DiagnosticFormatter:
    """Diagnostic formatting service.

    Attributes:
        output_format: Output style (rust, simple, json)
        max_source_length: Rule text longer than this is not echoed with a caret

    Example:
        >>> formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        >>> print(formatter.format(ErrorTemplate.missing_nplurals()))
        RULE_MISSING_NPLURALS: Plural rule header is missing a valid nplurals value
    """

    output_format: OutputFormat = OutputFormat.RUST
    max_source_length: int = 120

    def format(self, diagnostic: Diagnostic) -> str:
        """Format a single diagnostic.

        Args:
            diagnostic: Diagnostic to format

        Returns:
            Formatted diagnostic string
        """
        match self.output_format:
            case OutputFormat.RUST:
                return self._format_rust(diagnostic)
            case OutputFormat.SIMPLE:
                return f"{diagnostic.code.name}: {_escape(diagnostic.message)}"
            case OutputFormat.JSON:
                return self._format_json(diagnostic)

    def format_all(self, diagnostics: Iterable[Diagnostic]) -> str:
        """Format multiple diagnostics separated by blank lines."""
        return "\n\n".join(self.format(d) for d in diagnostics)

    def _format_rust(self, diagnostic: Diagnostic) -> str:
        parts = [f"{diagnostic.severity}[{diagnostic.code.name}]: {_escape(diagnostic.message)}"]

        if diagnostic.source_path:
            parts.append(f"  --> {_escape(diagnostic.source_path)}")

        source = diagnostic.source_text
        if source is not None and len(source) <= self.max_source_length:
            parts.append(f"  | {_escape(source)}")
            if diagnostic.position is not None and diagnostic.position <= len(source):
                parts.append(f"  | {' ' * diagnostic.position}^")

        if diagnostic.hint:
            parts.append(f"  = help: {_escape(diagnostic.hint)}")

        return "\n".join(parts)

    def _format_json(self, diagnostic: Diagnostic) -> str:
        data: dict[str, str | int | None] = {
            "code": diagnostic.code.name,
            "code_value": diagnostic.code.value,
            "message": diagnostic.message,
            "severity": diagnostic.severity,
        }
        if diagnostic.position is not None:
            data["position"] = diagnostic.position
        if diagnostic.source_text is not None:
            data["source_text"] = diagnostic.source_text
        if diagnostic.source_path:
            data["source_path"] = diagnostic.source_path
        if diagnostic.hint:
            data["hint"] = diagnostic.hint
        return json.dumps(data, ensure_ascii=False)


def _escape(text: str) -> str:
    """Escape control characters so one diagnostic stays one log record."""
    return text.replace("\r", "\\r").replace("\n", "\\n").replace("\t", "\\t")
