"""Text renderings of diagnostics."""
from __future__ import annotations

from typing import Final, Protocol

from diagtrack.constants import INDENT, NO_DETAILS_MESSAGE, OutputFormat, Severity
from diagtrack.diagnostics import Diagnostic

_HEADER_LABELS: Final[dict[Severity, str]] = {
    Severity.ERROR: "Error",
    Severity.WARNING: "Warning",
    Severity.INFORMATION: "Information",
}

_MSBUILD_LEVELS: Final[dict[Severity, str]] = {
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
}


def indent(*items: str) -> list[str]:
    return [f"{INDENT}{item}" for item in items]


def human_readable_format(diagnostic: Diagnostic | None) -> str:
    """
    Render a diagnostic as multi-line text for people.

    Position information is shown 1-based, assuming the stored range is 0-based.

    Raises:
        ValueError: If diagnostic is None.
    """
    if diagnostic is None:
        raise ValueError("diagnostic must not be None")

    body: list[str] = []
    if diagnostic.source is not None:
        body.append(f"File: {diagnostic.source}")
    if diagnostic.range is not None:
        start_line: int = diagnostic.range.start.line + 1
        start_char: int = diagnostic.range.start.character + 1
        body.append(f"Position: [ln {start_line}, cn {start_char}]")
    body.append(diagnostic.message or NO_DETAILS_MESSAGE)
    text: str = "\n".join(body)

    label: str | None = _HEADER_LABELS.get(diagnostic.severity)
    if label is not None:
        code_str: str = f" {diagnostic.code}" if diagnostic.code is not None else ""
        return f"\n{label}{code_str}:\n{text}"
    if diagnostic.code:
        return f"\n[{diagnostic.code}] {text}"
    return f"\n{text}"


def msbuild_format(diagnostic: Diagnostic | None) -> str:
    """
    Render a diagnostic as a single ``file(line,col): level code: message`` line.

    This is the shape build tools and editors scan for in compiler output.

    Raises:
        ValueError: If diagnostic is None.
    """
    if diagnostic is None:
        raise ValueError("diagnostic must not be None")

    level: str = _MSBUILD_LEVELS.get(diagnostic.severity, "info")
    code_str: str = f" {diagnostic.code}" if diagnostic.code is not None else ""
    source: str = diagnostic.source or ""
    position: str = ""
    if diagnostic.range is not None:
        position = f"({diagnostic.range.start.line + 1},{diagnostic.range.start.character + 1})"
    return f"{source}{position}: {level}{code_str}: {diagnostic.message}"


class Formatter(Protocol):
    def render(self, diagnostic: Diagnostic) -> str: ...


class HumanReadableFormatter:
    def render(self, diagnostic: Diagnostic) -> str:
        return human_readable_format(diagnostic)


class MSBuildFormatter:
    def render(self, diagnostic: Diagnostic) -> str:
        return msbuild_format(diagnostic)


def get_formatter(*, output_format: OutputFormat) -> Formatter:
    if output_format == OutputFormat.MSBUILD:
        return MSBuildFormatter()
    return HumanReadableFormatter()


def format_summary(*, error_count: int, warning_count: int, exception_count: int = 0) -> str:
    parts: list[str] = []
    if error_count > 0:
        parts.append(f"{error_count} error{'s' if error_count != 1 else ''}")
    if warning_count > 0:
        parts.append(f"{warning_count} warning{'s' if warning_count != 1 else ''}")
    if exception_count > 0:
        parts.append(f"{exception_count} exception{'s' if exception_count != 1 else ''}")

    if not parts:
        return "No issues found."

    return f"Found {', '.join(parts)}."
