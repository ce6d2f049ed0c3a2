"""Shared test fixtures for context_processor."""

import os
import tempfile

import pytest

from context_processor.store import ContextStore, DocumentDraft


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def store_root(tmp_path):
    return tmp_path / "contexts"


@pytest.fixture
def store(store_root):
    return ContextStore(store_root)


@pytest.fixture
def make_draft():
    """Build a valid draft, overriding any field."""

    def _make(**overrides):
        fields = {
            "title": "Test document",
            "content": "Some content about testing the store.",
            "tags": ["test"],
            "metadata": {"source": "unit"},
        }
        fields.update(overrides)
        return DocumentDraft(**fields)

    return _make


@pytest.fixture
def tmp_config_file(tmp_dir):
    """Create a temporary YAML config file."""
    import yaml

    config_data = {
        "storage": {
            "root": os.path.join(tmp_dir, "contexts"),
            "max_backups": 2,
        },
        "logging": {"level": "ERROR"},
    }
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path
