"""Constants and enums for diagtrack."""
from __future__ import annotations

from enum import Enum, IntEnum
from typing import Final

__version__: Final[str] = "0.1.0"


class Severity(IntEnum):
    """Diagnostic severity, ordered from most to least significant."""

    ERROR = 1
    WARNING = 2
    INFORMATION = 3
    HINT = 4

    @classmethod
    def parse(cls, name: str) -> Severity:
        """Parse a case-insensitive severity name."""
        key: str = name.strip().lower()
        key = _SEVERITY_ALIASES.get(key, key)
        try:
            return cls[key.upper()]
        except KeyError:
            raise ValueError(f"unknown severity: {name!r}") from None


_SEVERITY_ALIASES: Final[dict[str, str]] = {
    "warn": "warning",
    "info": "information",
}


class OutputFormat(Enum):
    """Output format options."""

    HUMAN = "human"
    MSBUILD = "msbuild"


CODE_PREFIX: Final[str] = "QS"

DEFAULT_VERBOSITY: Final[Severity] = Severity.WARNING

NO_DETAILS_MESSAGE: Final[str] = "no details are available"

INDENT: Final[str] = "    "
