"""Tests for the external ledger engine wrapper."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any

import pytest
from _pytest.monkeypatch import MonkeyPatch

from ledger_api.ledger_access import LedgerEngine, LedgerEngineError
from ledger_api.ledger_access import engine as engine_module
from ledger_api.runtime import ApiConfig


class _Recorder:
    def __init__(self, returncode: int = 0, stdout: str = "", stderr: str = "") -> None:
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.commands: list[list[str]] = []

    def __call__(self, cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        self.commands.append(cmd)
        return subprocess.CompletedProcess(cmd, self.returncode, stdout=self.stdout, stderr=self.stderr)


def test_command_passes_ledger_file_without_shell() -> None:
    engine = LedgerEngine("/data/my books.ledger", ledger_cmd="ledger --strict")

    assert engine.command(["balance", "^Assets"]) == [
        "ledger",
        "--strict",
        "-f",
        "/data/my books.ledger",
        "balance",
        "^Assets",
    ]


def test_from_config() -> None:
    config = ApiConfig(ledger_file=Path("/tmp/x.ledger"), ledger_cmd="hledger")

    engine = LedgerEngine.from_config(config)

    assert engine.ledger_file == Path("/tmp/x.ledger")
    assert engine.ledger_cmd == "hledger"
    assert engine.update_reports_script == config.update_reports_script


def test_run_returns_stdout(monkeypatch: MonkeyPatch) -> None:
    recorder = _Recorder(stdout="Assets:Checking\n")
    monkeypatch.setattr(engine_module.subprocess, "run", recorder)

    output = LedgerEngine("/tmp/x.ledger").run(["accounts"])

    assert output == "Assets:Checking\n"
    assert recorder.commands == [["ledger", "-f", "/tmp/x.ledger", "accounts"]]


def test_run_raises_on_nonzero_exit(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setattr(engine_module.subprocess, "run", _Recorder(returncode=1, stderr="Error: bad file"))

    with pytest.raises(LedgerEngineError, match="bad file"):
        LedgerEngine("/tmp/x.ledger").run(["balance"])


def test_run_raises_when_binary_missing(tmp_path: Path) -> None:
    engine = LedgerEngine(tmp_path / "x.ledger", ledger_cmd=str(tmp_path / "no-such-ledger-binary"))

    with pytest.raises(LedgerEngineError):
        engine.run(["balance"])


def test_regenerate_reports_skips_missing_script(tmp_path: Path) -> None:
    assert LedgerEngine(tmp_path / "x.ledger").regenerate_reports() is False
    assert LedgerEngine(tmp_path / "x.ledger", update_reports_script=tmp_path / "nope.sh").regenerate_reports() is False


def test_regenerate_reports_runs_script_with_bash(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    script = tmp_path / "update-reports.sh"
    script.write_text("echo ok\n")
    recorder = _Recorder()
    monkeypatch.setattr(engine_module.subprocess, "run", recorder)

    assert LedgerEngine(tmp_path / "x.ledger", update_reports_script=script).regenerate_reports() is True
    assert recorder.commands == [["bash", str(script)]]


def test_regenerate_reports_failure_is_not_raised(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    script = tmp_path / "update-reports.sh"
    script.write_text("exit 3\n")
    monkeypatch.setattr(engine_module.subprocess, "run", _Recorder(returncode=3, stderr="boom"))

    assert LedgerEngine(tmp_path / "x.ledger", update_reports_script=script).regenerate_reports() is False
