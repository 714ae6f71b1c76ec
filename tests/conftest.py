"""Shared pytest fixtures for ledger_api tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.helpers import SAMPLE_LEDGER, FakeEngine


@pytest.fixture
def ledger_file(tmp_path: Path) -> Path:
    path = tmp_path / "data" / "demo.ledger"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(SAMPLE_LEDGER)
    return path


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()
