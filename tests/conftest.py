"""Pytest configuration and fixtures."""

from __future__ import annotations

import json
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

# Ensure src/ is on sys.path for tests so the src layout is used during test runs
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from json_hash.hasher import JsonHash  # noqa: E402

DATA_DIR = Path(__file__).parent / "data"

_ENV_VARS = (
    "JSON_HASH_LENGTH",
    "JSON_HASH_PRECISION",
    "JSON_HASH_UPDATE_EXISTING",
    "JSON_HASH_RECURSIVE",
    "JSON_HASH_MAX_DEPTH",
    "JSON_HASH_CONFIG_PATH",
    "JSON_HASH_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep developer environment variables and config files out of tests."""

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def jh() -> JsonHash:
    """Hasher with the default 22 character / 10 digit configuration."""

    return JsonHash()


@pytest.fixture
def calc_hash(jh: JsonHash) -> Callable[[str], str]:
    return jh.calc_hash


@pytest.fixture
def load_data() -> Callable[[str], Any]:
    """Return a loader for JSON documents stored under ``tests/data``."""

    def _load(name: str) -> Any:
        return json.loads((DATA_DIR / name).read_text(encoding="utf-8"))

    return _load
