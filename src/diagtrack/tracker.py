"""Diagnostic tracker: suppression, counting, line offsets and verbosity filtering."""
from __future__ import annotations

import logging
import threading
import traceback
from collections.abc import Callable, Iterable
from typing import Protocol, runtime_checkable

from diagtrack.catalog import CodeCatalog, MessageCatalog
from diagtrack.constants import DEFAULT_VERBOSITY, Severity
from diagtrack.diagnostics import Diagnostic, Range
from diagtrack.sinks import Sink

logger: logging.Logger = logging.getLogger(__name__)

ExceptionHandler = Callable[[BaseException], Diagnostic | None]


def describe_exception(exception: BaseException) -> Diagnostic | None:
    """Default exception handler: a HINT carrying the full traceback text."""
    description: str = "".join(traceback.format_exception(exception)).rstrip("\n")
    return Diagnostic(severity=Severity.HINT, message=f"\n{description}\n")


@runtime_checkable
class Logger(Protocol):
    """Logging surface handed to components that report diagnostics."""

    def log_error(
        self,
        code: int,
        args: Iterable[str] | None = None,
        *,
        source: str | None = None,
        range: Range | None = None,
    ) -> None: ...

    def log_warning(
        self,
        code: int,
        args: Iterable[str] | None = None,
        *,
        source: str | None = None,
        range: Range | None = None,
    ) -> None: ...

    def log_information(
        self,
        code: int,
        args: Iterable[str] | None = None,
        *,
        source: str | None = None,
        range: Range | None = None,
        extra_lines: Iterable[str] = (),
    ) -> None: ...

    def log_diagnostic(self, diagnostic: Diagnostic | None) -> None: ...

    def log_batch(self, diagnostics: Iterable[Diagnostic | None] | None) -> None: ...

    def log_exception(self, exception: BaseException | None) -> None: ...


class LogTracker:
    """
    Tracks diagnostics reported during one compilation session.

    Warnings whose code is listed in ``no_warn`` are dropped without being
    counted. Every other error and warning is counted, shifted by
    ``line_offset`` and handed to the sink if its severity is at least as
    significant as ``verbosity``. The tracker may be shared between threads.
    """

    def __init__(
        self,
        *,
        sink: Sink,
        catalog: CodeCatalog | None = None,
        verbosity: Severity = DEFAULT_VERBOSITY,
        no_warn: Iterable[int] = (),
        line_offset: int = 0,
        exception_handler: ExceptionHandler = describe_exception,
    ) -> None:
        self.verbosity: Severity = verbosity
        self._sink: Sink = sink
        self._catalog: CodeCatalog = catalog if catalog is not None else MessageCatalog()
        self._no_warn: frozenset[int] = frozenset(no_warn)
        self._line_offset: int = line_offset
        self._exception_handler: ExceptionHandler = exception_handler
        self._lock: threading.Lock = threading.Lock()
        self._error_count: int = 0
        self._warning_count: int = 0
        self._exception_count: int = 0

    @property
    def no_warn(self) -> frozenset[int]:
        return self._no_warn

    @property
    def line_offset(self) -> int:
        return self._line_offset

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def warning_count(self) -> int:
        return self._warning_count

    @property
    def exception_count(self) -> int:
        return self._exception_count

    # convenience entry points

    def log_error(
        self,
        code: int,
        args: Iterable[str] | None = None,
        *,
        source: str | None = None,
        range: Range | None = None,
    ) -> None:
        """Log an error built from a catalog code."""
        self.log_diagnostic(Diagnostic(
            severity=Severity.ERROR,
            code=self._catalog.canonical_identifier(code),
            source=source,
            message=self._catalog.message_for(code, args),
            range=range,
        ))

    def log_warning(
        self,
        code: int,
        args: Iterable[str] | None = None,
        *,
        source: str | None = None,
        range: Range | None = None,
    ) -> None:
        """Log a warning built from a catalog code."""
        self.log_diagnostic(Diagnostic(
            severity=Severity.WARNING,
            code=self._catalog.canonical_identifier(code),
            source=source,
            message=self._catalog.message_for(code, args),
            range=range,
        ))

    def log_information(
        self,
        code: int,
        args: Iterable[str] | None = None,
        *,
        source: str | None = None,
        range: Range | None = None,
        extra_lines: Iterable[str] = (),
    ) -> None:
        """Log an informational note; extra lines are appended below the catalog message."""
        message: str = self._catalog.message_for(code, args)
        lines: list[str] = list(extra_lines)
        if lines:
            message = "\n".join([message, *lines])
        self.log_diagnostic(Diagnostic(
            severity=Severity.INFORMATION,
            code=None,
            source=source,
            message=message,
            range=range,
        ))

    def log_batch(self, diagnostics: Iterable[Diagnostic | None] | None) -> None:
        """Log each diagnostic in order, skipping None entries."""
        if diagnostics is None:
            return
        for diagnostic in diagnostics:
            if diagnostic is None:
                continue
            self.log_diagnostic(diagnostic)

    # core routines

    def log_diagnostic(self, diagnostic: Diagnostic | None) -> None:
        """
        Count the diagnostic and pass it on to the sink if verbosity permits.

        Raises:
            ValueError: If diagnostic is None.
        """
        if diagnostic is None:
            raise ValueError("diagnostic must not be None")

        if not self._accept(diagnostic):
            logger.debug("Suppressed warning %s", diagnostic.code)
            return

        self._output(diagnostic.with_line_offset(self._line_offset))

    def log_exception(self, exception: BaseException | None) -> None:
        """
        Count the exception and hand it to the exception handler.

        Raises:
            ValueError: If exception is None.
        """
        if exception is None:
            raise ValueError("exception must not be None")

        with self._lock:
            self._exception_count += 1
        logger.debug("Exception logged: %s", type(exception).__name__)
        self._output(self._exception_handler(exception))

    def _accept(self, diagnostic: Diagnostic) -> bool:
        """Apply warning suppression and update counters as one step."""
        with self._lock:
            if diagnostic.severity == Severity.WARNING and self._is_suppressed(diagnostic.code):
                return False
            if diagnostic.severity == Severity.ERROR:
                self._error_count += 1
            elif diagnostic.severity == Severity.WARNING:
                self._warning_count += 1
        return True

    def _is_suppressed(self, code: str | None) -> bool:
        if not self._no_warn:
            return False
        number: int | None = self._catalog.try_resolve_code(code)
        return number is not None and number in self._no_warn

    def _output(self, diagnostic: Diagnostic | None) -> None:
        if diagnostic is None:
            return
        if diagnostic.severity <= self.verbosity:
            self._sink.print(diagnostic)
        else:
            logger.debug("Filtered %s below verbosity %s", diagnostic.severity.name, self.verbosity.name)
