"""Diagnostic code catalog: canonical identifiers and message templates."""
from __future__ import annotations

import re
import string
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final, Protocol, runtime_checkable

from diagtrack.constants import CODE_PREFIX, Severity
from diagtrack.formatting import indent

_CODE_PATTERN: Final[re.Pattern[str]] = re.compile(rf"^{CODE_PREFIX}(\d+)$")


class CatalogError(Exception):
    """Raised when a code is not known to the catalog."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        self.code: int | None = code
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class CodeInfo:
    number: int
    kind: Severity
    name: str
    template: str


@runtime_checkable
class CodeCatalog(Protocol):
    """Structural interface for code catalogs consumed by the tracker."""

    def message_for(self, code: int, args: Iterable[str] | None) -> str: ...

    def canonical_identifier(self, code: int) -> str: ...

    def try_resolve_code(self, code: str | None) -> int | None: ...


def _entry(number: int, kind: Severity, name: str, template: str) -> tuple[int, CodeInfo]:
    return number, CodeInfo(number=number, kind=kind, name=name, template=template)


DEFAULT_CODES: Final[Mapping[int, CodeInfo]] = MappingProxyType(dict([
    _entry(1001, Severity.ERROR, "InvalidToken", "Unexpected token \"{0}\"."),
    _entry(1002, Severity.ERROR, "MissingSemicolon", "Expecting a semicolon."),
    _entry(3001, Severity.ERROR, "UnknownIdentifier", "No identifier with the name \"{0}\" exists."),
    _entry(5001, Severity.ERROR, "TypeMismatch", "The type {0} does not match the type {1}."),
    _entry(7001, Severity.ERROR, "SourceFileNotFound", "Could not find the source file \"{0}\"."),
    _entry(2001, Severity.WARNING, "UnusedVariable", "The variable \"{0}\" is never used."),
    _entry(2002, Severity.WARNING, "DeprecatedOperator", "The operator {0} is deprecated; use {1} instead."),
    _entry(2003, Severity.WARNING, "UnreachableCode", "This statement will never be executed."),
    _entry(9001, Severity.INFORMATION, "FilesFound", "Found {0} source file(s)."),
    _entry(9002, Severity.INFORMATION, "CompilationCompleted", "Compilation completed in {0} ms."),
]))


class MessageCatalog:
    """Table-driven catalog rendering ``QSnnnn`` identifiers and templated messages."""

    def __init__(self, codes: Mapping[int, CodeInfo] = DEFAULT_CODES) -> None:
        self._codes: Mapping[int, CodeInfo] = MappingProxyType(dict(codes))

    @property
    def codes(self) -> Mapping[int, CodeInfo]:
        return self._codes

    def lookup(self, code: int) -> CodeInfo:
        """Return the catalog entry for a code, raising CatalogError if unknown."""
        info: CodeInfo | None = self._codes.get(code)
        if info is None:
            raise CatalogError(f"Unknown diagnostic code {self.canonical_identifier(code)}", code=code)
        return info

    def message_for(self, code: int, args: Iterable[str] | None) -> str:
        """
        Fill the code's template with positional arguments.

        Placeholders without a matching argument render as empty strings.
        """
        template: str = self.lookup(code).template
        values: list[str] = [str(a) for a in args] if args is not None else []
        needed: int = _placeholder_count(template)
        if len(values) < needed:
            values.extend([""] * (needed - len(values)))
        return template.format(*values)

    def canonical_identifier(self, code: int) -> str:
        return f"{CODE_PREFIX}{code:04d}"

    def try_resolve_code(self, code: str | None) -> int | None:
        if not isinstance(code, str):
            return None
        match: re.Match[str] | None = _CODE_PATTERN.match(code.strip())
        if match is None:
            return None
        return int(match.group(1))


def _placeholder_count(template: str) -> int:
    """Return how many positional arguments a template needs."""
    highest: int = -1
    for _, field_name, _, _ in string.Formatter().parse(template):
        if field_name is not None and field_name.isdigit():
            highest = max(highest, int(field_name))
    return highest + 1


def format_code_detail(*, info: CodeInfo, catalog: MessageCatalog) -> str:
    """Format a single catalog entry for the explain command."""
    lines: list[str] = [
        f"{catalog.canonical_identifier(info.number)}: {info.name}",
        f"Kind: {info.kind.name.lower()}",
        "",
        *indent(f"Message: {info.template}"),
    ]
    if info.kind == Severity.WARNING:
        lines.extend([
            "",
            *indent(f"Suppress: no_warn = [{info.number}]"),
        ])
    return "\n".join(lines)


def format_code_table(*, catalog: MessageCatalog) -> str:
    """Format all catalog entries as a summary table."""
    lines: list[str] = [
        f"{'CODE':<8} {'KIND':<12} {'NAME':<24}",
        "-" * 46,
    ]
    for number in sorted(catalog.codes):
        info: CodeInfo = catalog.codes[number]
        lines.append(
            f"{catalog.canonical_identifier(number):<8} {info.kind.name.lower():<12} {info.name:<24}"
        )
    return "\n".join(lines)
