"""Diagnostic data model for diagtrack."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from diagtrack.constants import Severity


@dataclass(frozen=True, slots=True)
class Position:
    """Position in a source unit. All values are 0-based."""

    line: int
    character: int


@dataclass(frozen=True, slots=True)
class Range:
    """Start and end position of a diagnostic."""

    start: Position
    end: Position

    def shifted(self, offset: int) -> Range:
        """Return a copy with both line numbers moved by offset."""
        return Range(
            start=replace(self.start, line=self.start.line + offset),
            end=replace(self.end, line=self.end.line + offset),
        )


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single reported occurrence of an error, warning, note or exception."""

    severity: Severity
    message: str = ""
    code: str | None = None
    source: str | None = None
    range: Range | None = None

    def with_line_offset(self, offset: int) -> Diagnostic:
        """Return a copy with shifted line numbers; records without a range are returned as is."""
        if self.range is None:
            return self
        return replace(self, range=self.range.shifted(offset))

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "severity": self.severity.name.lower(),
            "code": self.code,
            "source": self.source,
            "message": self.message,
            "range": None,
        }
        if self.range is not None:
            data["range"] = {
                "start": {
                    "line": self.range.start.line,
                    "character": self.range.start.character,
                },
                "end": {
                    "line": self.range.end.line,
                    "character": self.range.end.character,
                },
            }
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Diagnostic:
        """
        Build a diagnostic from its JSON shape.

        Args:
            data: Mapping with a required ``severity`` and optional ``code``,
                ``source``, ``message`` and ``range`` keys.

        Returns:
            The parsed diagnostic.

        Raises:
            ValueError: If the severity, code, source or range is malformed.
        """
        raw_severity: Any = data.get("severity")
        if not isinstance(raw_severity, str):
            raise ValueError("diagnostic severity must be a string")
        severity: Severity = Severity.parse(raw_severity)

        raw_range: Any = data.get("range")
        parsed_range: Range | None = None
        if raw_range is not None:
            parsed_range = _parse_range(raw_range)

        code: Any = data.get("code")
        if code is not None and not isinstance(code, str):
            raise ValueError("diagnostic code must be a string")
        source: Any = data.get("source")
        if source is not None and not isinstance(source, str):
            raise ValueError("diagnostic source must be a string")

        message: Any = data.get("message") or ""
        return cls(
            severity=severity,
            message=str(message),
            code=code,
            source=source,
            range=parsed_range,
        )


def _parse_range(raw: Any) -> Range:
    if not isinstance(raw, dict):
        raise ValueError("diagnostic range must be an object")
    start: Position = _parse_position(raw.get("start"), field_name="start")
    end: Position = (
        _parse_position(raw["end"], field_name="end") if raw.get("end") is not None else start
    )
    return Range(start=start, end=end)


def _parse_position(raw: Any, *, field_name: str) -> Position:
    if not isinstance(raw, dict):
        raise ValueError(f"range.{field_name} must be an object")
    line: Any = raw.get("line", 0)
    character: Any = raw.get("character", 0)
    if not _is_index(line) or not _is_index(character):
        raise ValueError(f"range.{field_name} needs non-negative integer line and character")
    return Position(line=line, character=character)


def _is_index(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0
