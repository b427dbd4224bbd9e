"""Configuration types for diagtrack."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from diagtrack.constants import DEFAULT_VERBOSITY, OutputFormat, Severity


@dataclass(frozen=True, slots=True)
class TrackerConfig:
    """Complete diagtrack configuration."""

    config_path: Path | None = None
    verbosity: Severity = DEFAULT_VERBOSITY
    no_warn: frozenset[int] = frozenset()
    line_offset: int = 0
    output_format: OutputFormat = OutputFormat.HUMAN


class ConfigError(Exception):
    """Error during configuration loading or validation."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        self.path: Path | None = path
        super().__init__(message)
