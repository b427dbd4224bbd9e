"""Sinks consuming diagnostics that passed the tracker's filters."""
from __future__ import annotations

import threading
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

import click

from diagtrack.constants import Severity
from diagtrack.diagnostics import Diagnostic
from diagtrack.formatting import Formatter, HumanReadableFormatter


@runtime_checkable
class Sink(Protocol):
    """Consumer of fully processed diagnostics."""

    def print(self, diagnostic: Diagnostic) -> None: ...


class ConsoleSink:
    """Writes rendered diagnostics to the terminal, one whole record at a time."""

    def __init__(self, *, formatter: Formatter | None = None, err: bool = False) -> None:
        self._formatter: Formatter = formatter if formatter is not None else HumanReadableFormatter()
        self._err: bool = err
        self._lock: threading.Lock = threading.Lock()

    def print(self, diagnostic: Diagnostic) -> None:
        text: str = self._formatter.render(diagnostic)
        with self._lock:
            click.echo(text, err=self._err)


@dataclass(slots=True)
class DiagnosticCollection:
    """Sink that keeps every printed diagnostic in memory."""

    _diagnostics: list[Diagnostic] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def print(self, diagnostic: Diagnostic) -> None:
        with self._lock:
            self._diagnostics.append(diagnostic)

    @property
    def sorted(self) -> list[Diagnostic]:
        """Return diagnostics sorted by source, line, character."""
        with self._lock:
            snapshot: list[Diagnostic] = list(self._diagnostics)
        return sorted(snapshot, key=_sort_key)

    def of_severity(self, severity: Severity) -> list[Diagnostic]:
        with self._lock:
            return [d for d in self._diagnostics if d.severity == severity]

    def __len__(self) -> int:
        with self._lock:
            return len(self._diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        with self._lock:
            return iter(list(self._diagnostics))


def _sort_key(diagnostic: Diagnostic) -> tuple[str, int, int]:
    if diagnostic.range is None:
        return (diagnostic.source or "", -1, -1)
    return (
        diagnostic.source or "",
        diagnostic.range.start.line,
        diagnostic.range.start.character,
    )
