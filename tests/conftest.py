"""Pytest configuration and shared fixtures for VantageFlow tests."""

import tempfile
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path

import pytest

from vantageflow.config.app import IngestionConfig
from vantageflow.ingest import ProjectTextParser


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fixed_now() -> datetime:
    """A pinned clock so dates in results are predictable."""
    return datetime(2026, 1, 12, 9, 0, 0)


@pytest.fixture
def default_config() -> IngestionConfig:
    """Create a default IngestionConfig for testing."""
    return IngestionConfig()


@pytest.fixture
def parser(default_config: IngestionConfig) -> ProjectTextParser:
    """Create a ProjectTextParser with default configuration."""
    return ProjectTextParser(default_config)
