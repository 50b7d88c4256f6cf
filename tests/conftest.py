"""Pytest configuration for test isolation.

The CLI reads its YAML rules from ``OZZ_CONFIG_DIR`` (default ``./config``) and
writes run logs under ``OZZ_LOG_DIR`` (default ``./logs``). When tests run in
the working tree, a developer's real config or earlier run logs would leak into
assertions, so both are redirected to per-test temporary directories.

Logging is also reset: the CLI configures the ``ozz`` logger with
``propagate=False``, which would hide records from ``caplog`` in later tests.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

import pytest

from ozz import logging_setup


@pytest.fixture(autouse=True)
def _isolate_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point config and log directories at the test's own temporary directory."""

    config_dir = tmp_path / "config"
    log_dir = tmp_path / "logs"
    config_dir.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("OZZ_CONFIG_DIR", os.fspath(config_dir))
    monkeypatch.setenv("OZZ_LOG_DIR", os.fspath(log_dir))
    monkeypatch.delenv("OZZ_LOG_LEVEL", raising=False)
    # Fake credentials; load_dotenv(override=False) never replaces them.
    monkeypatch.setenv("ORGANIZZE_EMAIL", "test@example.com")
    monkeypatch.setenv("ORGANIZZE_TOKEN", "test-token")


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    yield
    logger = logging.getLogger("ozz")
    if logging_setup._HANDLER is not None:
        logger.removeHandler(logging_setup._HANDLER)
        logging_setup._HANDLER = None
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    return tmp_path / "config"
