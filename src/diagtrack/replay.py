"""Replay recorded diagnostics through a tracker."""
from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from diagtrack.diagnostics import Diagnostic
from diagtrack.formatting import format_summary
from diagtrack.tracker import LogTracker

logger: logging.Logger = logging.getLogger(__name__)


class ReplayError(Exception):
    """A diagnostics file or record that cannot be read."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        self.path: Path | None = path
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class ReplayResult:
    files_read: int
    records_read: int
    error_count: int
    warning_count: int
    exception_count: int
    exit_code: int


def load_records(*, path: Path) -> list[Any]:
    """
    Read the raw record list from a JSON file.

    The file holds either a list of records or an object with a
    ``diagnostics`` list.

    Raises:
        ReplayError: If the file cannot be read or has the wrong shape.
    """
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ReplayError(f"Cannot read {path}: {e}", path=path) from e
    except json.JSONDecodeError as e:
        raise ReplayError(f"Invalid JSON in {path}: {e}", path=path) from e

    if isinstance(data, dict):
        data = data.get("diagnostics")
    if not isinstance(data, list):
        raise ReplayError(f"{path} does not contain a list of diagnostics", path=path)
    return data


def parse_record(item: Any, *, path: Path, index: int) -> Diagnostic | None:
    if item is None:
        return None
    if not isinstance(item, dict):
        raise ReplayError(f"{path}: record {index} is not an object", path=path)
    try:
        return Diagnostic.from_dict(item)
    except ValueError as e:
        raise ReplayError(f"{path}: record {index}: {e}", path=path) from e


def replay_paths(*, paths: tuple[Path, ...], tracker: LogTracker) -> ReplayResult:
    start: float = time.perf_counter()
    files_read: int = 0
    records_read: int = 0

    for path in paths:
        logger.debug("Reading %s", path)
        try:
            items: list[Any] = load_records(path=path)
        except ReplayError as e:
            tracker.log_exception(e)
            continue
        files_read += 1

        records: list[Diagnostic | None] = []
        for index, item in enumerate(items):
            try:
                records.append(parse_record(item, path=path, index=index))
            except ReplayError as e:
                tracker.log_exception(e)
        records_read += sum(1 for r in records if r is not None)
        logger.debug("%s: %d diagnostics", path, len(records))
        tracker.log_batch(records)

    elapsed: float = time.perf_counter() - start
    logger.info("Replayed %d diagnostics from %d files", records_read, files_read)
    logger.info("Completed in %.3fs", elapsed)

    failed: bool = tracker.error_count > 0 or tracker.exception_count > 0
    return ReplayResult(
        files_read=files_read,
        records_read=records_read,
        error_count=tracker.error_count,
        warning_count=tracker.warning_count,
        exception_count=tracker.exception_count,
        exit_code=1 if failed else 0,
    )


def format_results(*, result: ReplayResult) -> str:
    summary: str = format_summary(
        error_count=result.error_count,
        warning_count=result.warning_count,
        exception_count=result.exception_count,
    )
    suffix: str = "s" if result.files_read != 1 else ""
    return "\n".join([summary, f"Read {result.files_read} file{suffix}."])
