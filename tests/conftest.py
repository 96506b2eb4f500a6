"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from bertenv.adapters.mock import MockAdapter
from bertenv.adapters.registry import AdapterRegistry
from bertenv.core.models.settings import InstallerSettings


@pytest.fixture
def settings() -> InstallerSettings:
    """Built-in default settings."""
    return InstallerSettings()


@pytest.fixture
def mock_adapter() -> MockAdapter:
    """A mock that succeeds unless told otherwise."""
    return MockAdapter()


@pytest.fixture
def mock_registry(mock_adapter: MockAdapter) -> AdapterRegistry:
    """Registry routing every action to ``mock_adapter``."""
    registry = AdapterRegistry()
    registry.set_mock_mode(True, mock_adapter=mock_adapter)
    return registry


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch) -> Path:
    """A BERT project checkout with a requirements.txt, as cwd."""
    (tmp_path / "requirements.txt").write_text("transformers==4.10.0\nnumpy\nscikit-learn\n")
    monkeypatch.chdir(tmp_path)
    return tmp_path
