"""Shared fixtures for CLI tests."""

from pathlib import Path

import pytest


@pytest.fixture
def tmp_config_path(tmp_path: Path) -> Path:
    """Provide a temporary config file path."""
    return tmp_path / "tabletalk.yaml"


@pytest.fixture
def keyed_config_path(tmp_config_path: Path) -> Path:
    """Config file with an API key and no streaming delay."""
    tmp_config_path.write_text("llm:\n  api_key: sk-test\nagent:\n  token_delay: 0\n")
    return tmp_config_path
