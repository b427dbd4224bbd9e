"""Configuration loading and validation for diagtrack."""
from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from diagtrack.catalog import CodeCatalog, MessageCatalog
from diagtrack.constants import DEFAULT_VERBOSITY, OutputFormat, Severity
from diagtrack.sinks import Sink
from diagtrack.tracker import LogTracker
from diagtrack.types import ConfigError, TrackerConfig

logger: logging.Logger = logging.getLogger(__name__)


class ConfigLoader:
    """Loads and validates diagtrack configuration."""

    @staticmethod
    def find_config_file(start_path: Path | None = None) -> Path | None:
        """
        Find pyproject.toml by walking up from start_path.

        Args:
            start_path: Directory to start searching from. Defaults to cwd.

        Returns:
            Path to pyproject.toml if found, None otherwise.
        """
        if start_path is None:
            start_path = Path.cwd()

        start_path = start_path.resolve()

        for directory in [start_path, *start_path.parents]:
            config_path: Path = directory / "pyproject.toml"
            if config_path.is_file():
                return config_path

        return None

    @staticmethod
    def load(path: Path | None = None) -> TrackerConfig:
        """
        Load configuration from pyproject.toml.

        Args:
            path: Explicit path to pyproject.toml. If None, searches upward.

        Returns:
            Validated TrackerConfig instance.

        Raises:
            ConfigError: If configuration is invalid.
        """
        if path is None:
            path = ConfigLoader.find_config_file()

        if path is None:
            logger.debug("No pyproject.toml found, using defaults")
            return TrackerConfig()

        try:
            with open(path, "rb") as f:
                data: dict[str, Any] = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML: {e}", path=path) from e
        except OSError as e:
            raise ConfigError(f"Cannot read config file: {e}", path=path) from e

        tool_config: dict[str, Any] = data.get("tool", {}).get("diagtrack", {})
        logger.debug("Loaded configuration from %s", path)

        return ConfigLoader._parse_config(tool_config, config_path=path)

    @staticmethod
    def _parse_config(
        data: dict[str, Any],
        *,
        config_path: Path | None = None,
    ) -> TrackerConfig:
        """Parse and validate configuration dictionary."""
        errors: list[str] = []

        verbosity: Severity = DEFAULT_VERBOSITY
        if "verbosity" in data:
            try:
                verbosity = Severity.parse(str(data["verbosity"]))
            except ValueError:
                valid: list[str] = [s.name.lower() for s in Severity]
                errors.append(f"verbosity must be one of {valid}")

        no_warn: frozenset[int] = ConfigLoader._parse_no_warn(data.get("no_warn", []), errors)

        line_offset: Any = data.get("line_offset", 0)
        if not isinstance(line_offset, int) or isinstance(line_offset, bool):
            errors.append(f"line_offset must be an integer, got {type(line_offset).__name__}")
            line_offset = 0

        output_format: OutputFormat = OutputFormat.HUMAN
        if "output_format" in data:
            try:
                output_format = OutputFormat(data["output_format"])
            except ValueError:
                valid = [f.value for f in OutputFormat]
                errors.append(f"output_format must be one of {valid}")

        if errors:
            error_msg: str = "Configuration errors:\n" + "\n".join(
                f"  - {e}" for e in errors
            )
            raise ConfigError(error_msg, path=config_path)

        return TrackerConfig(
            config_path=config_path,
            verbosity=verbosity,
            no_warn=no_warn,
            line_offset=line_offset,
            output_format=output_format,
        )

    @staticmethod
    def _parse_no_warn(raw: Any, errors: list[str]) -> frozenset[int]:
        """Parse suppressed warning codes given as numbers or QSnnnn strings."""
        if not isinstance(raw, list):
            errors.append("no_warn must be a list")
            return frozenset()

        catalog: MessageCatalog = MessageCatalog()
        codes: set[int] = set()
        invalid: list[Any] = []
        for item in raw:
            if isinstance(item, int) and not isinstance(item, bool):
                codes.add(item)
                continue
            resolved: int | None = (
                catalog.try_resolve_code(item) if isinstance(item, str) else None
            )
            if resolved is None:
                invalid.append(item)
            else:
                codes.add(resolved)

        if invalid:
            errors.append(f"no_warn contains invalid codes: {invalid}")
        return frozenset(codes)


def load_config(path: Path | None = None) -> TrackerConfig:
    """
    Convenience function to load configuration.

    Args:
        path: Optional explicit path to pyproject.toml.

    Returns:
        Validated configuration.
    """
    return ConfigLoader.load(path)


def build_tracker(
    *,
    config: TrackerConfig,
    sink: Sink,
    catalog: CodeCatalog | None = None,
) -> LogTracker:
    """Create a tracker for one session from resolved configuration."""
    return LogTracker(
        sink=sink,
        catalog=catalog,
        verbosity=config.verbosity,
        no_warn=config.no_warn,
        line_offset=config.line_offset,
    )
