"""Pytest fixtures for diagtrack tests."""
from __future__ import annotations

from pathlib import Path

import pytest

from diagtrack.constants import Severity
from diagtrack.sinks import DiagnosticCollection
from diagtrack.tracker import LogTracker


@pytest.fixture
def collection() -> DiagnosticCollection:
    """In-memory sink."""
    return DiagnosticCollection()


@pytest.fixture
def tracker(collection: DiagnosticCollection) -> LogTracker:
    """Tracker printing everything to the in-memory sink."""
    return LogTracker(sink=collection, verbosity=Severity.HINT)


@pytest.fixture
def temp_pyproject(tmp_path: Path) -> Path:
    """Create a temporary pyproject.toml file."""
    config_path: Path = tmp_path / "pyproject.toml"
    config_path.write_text(
        """
[tool.diagtrack]
verbosity = "information"
no_warn = [2001, "QS2003"]
line_offset = 4
output_format = "msbuild"
"""
    )
    return config_path


@pytest.fixture
def empty_pyproject(tmp_path: Path) -> Path:
    """Create a pyproject.toml without [tool.diagtrack] section."""
    config_path: Path = tmp_path / "pyproject.toml"
    config_path.write_text(
        """
[project]
name = "test-project"
version = "0.1.0"
"""
    )
    return config_path


@pytest.fixture
def invalid_toml(tmp_path: Path) -> Path:
    """Create an invalid TOML file."""
    config_path: Path = tmp_path / "pyproject.toml"
    config_path.write_text("invalid [ toml content")
    return config_path


@pytest.fixture
def invalid_config(tmp_path: Path) -> Path:
    """Create a pyproject.toml with invalid diagtrack config."""
    config_path: Path = tmp_path / "pyproject.toml"
    config_path.write_text(
        """
[tool.diagtrack]
verbosity = "loud"
no_warn = ["W17", 2002]
line_offset = "three"
output_format = "xml"
"""
    )
    return config_path
