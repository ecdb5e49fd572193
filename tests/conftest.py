"""Shared pytest fixtures for the gsuite editing tools.

The tools are standalone uv scripts that import their siblings by name, so
their directory goes on sys.path the same way the scripts do it themselves.
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

TOOLS_DIR = Path(__file__).parent.parent / "core" / "skills" / "gsuite" / "tools"
sys.path.insert(0, str(TOOLS_DIR))

import utils  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point config lookups at an empty temp dir and silence debug output."""
    config_file = tmp_path / "config.yml"
    monkeypatch.setattr(utils, "CONFIG_FILE", config_file)
    monkeypatch.delenv("GSUITE_DEBUG", raising=False)
    return config_file


def make_docs_service(doc: dict[str, Any] | None = None, replies: list[dict[str, Any]] | None = None) -> MagicMock:
    """A Docs service whose get() returns ``doc`` and batchUpdate() ``replies``."""
    service = MagicMock()
    documents = service.documents.return_value
    documents.get.return_value.execute.return_value = doc or {}
    documents.batchUpdate.return_value.execute.return_value = {"replies": replies or []}
    documents.create.return_value.execute.return_value = {"documentId": "new-doc"}
    return service


@pytest.fixture
def docs_service() -> MagicMock:
    return make_docs_service()
