"""Shared pytest fixtures and test helpers for bootcfg tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from bootcfg.config.settings import ENV_PREFIX
from bootcfg.infrastructure.store import Store, open_store

SAMPLE_GROUPS_YAML = """\
api_version: v1alpha1
groups:
  - name: default
    spec: discovery
  - name: node1
    spec: worker
    require:
      mac: 52:54:00:89:D8:10
    metadata:
      networkd_name: ens3
  - name: node2
    spec: controller
    require:
      uuid: 16e7d8a7-bfa9-428b-9117-363341bb330b
"""


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Strip any BOOTCFG_* variables inherited from the developer's shell."""
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    named = [logging.getLogger(name) for name in ("bootcfg", "uvicorn", "uvicorn.error")]
    named_levels = [logger.level for logger in named]
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    for logger, level in zip(named, named_levels, strict=True):
        logger.setLevel(level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Empty data directory."""
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def images_dir(tmp_path: Path) -> Path:
    """Images directory holding one boot asset."""
    path = tmp_path / "images"
    (path / "coreos").mkdir(parents=True)
    (path / "coreos" / "kernel").write_bytes(b"vmlinuz")
    return path


@pytest.fixture
def groups_file(tmp_path: Path) -> Path:
    """Well-formed bootstrap file with three groups."""
    path = tmp_path / "config.yaml"
    path.write_text(SAMPLE_GROUPS_YAML, encoding="utf-8")
    return path


@pytest.fixture
def store(data_dir: Path) -> Generator[Store]:
    """Freshly opened store on a temp data directory."""
    s = open_store(data_dir)
    try:
        yield s
    finally:
        s.close()
