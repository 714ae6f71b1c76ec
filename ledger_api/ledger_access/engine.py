"""Invoke the external ``ledger`` binary and the report regeneration script."""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Sequence
from pathlib import Path

from ledger_api.runtime import ApiConfig, get_logger

logger = get_logger(__name__)


class LedgerEngineError(RuntimeError):
    """Raised when the external ledger command cannot produce a report."""


class LedgerEngine:
    """Thin wrapper over the configured ledger command line tool."""

    def __init__(
        self,
        ledger_file: Path | str,
        ledger_cmd: str = "ledger",
        update_reports_script: Path | str | None = None,
    ) -> None:
        self.ledger_file = Path(ledger_file)
        self.ledger_cmd = ledger_cmd
        self.update_reports_script = Path(update_reports_script) if update_reports_script else None

    @classmethod
    def from_config(cls, config: ApiConfig) -> LedgerEngine:
        return cls(
            ledger_file=config.ledger_file,
            ledger_cmd=config.ledger_cmd,
            update_reports_script=config.update_reports_script,
        )

    def command(self, args: Sequence[str]) -> list[str]:
        """Build the argv for ``ledger -f <file> <args...>``."""
        return [*shlex.split(self.ledger_cmd), "-f", str(self.ledger_file), *args]

    def run(self, args: Sequence[str]) -> str:
        """Run a ledger report and return its stdout."""
        cmd = self.command(args)
        logger.debug("Running ledger command: %s", shlex.join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as exc:
            raise LedgerEngineError(f"Failed to execute ledger command: {exc}") from exc

        if result.returncode != 0:
            stderr = result.stderr.strip()
            raise LedgerEngineError(f"Failed to execute ledger command (exit {result.returncode}): {stderr}")
        return result.stdout

    def regenerate_reports(self) -> bool:
        """Run the report regeneration script; failures are logged, not raised."""
        script = self.update_reports_script
        if script is None:
            logger.debug("No report regeneration script configured; skipping.")
            return False
        if not script.exists():
            logger.warning("Report regeneration script not found: %s", script)
            return False

        try:
            result = subprocess.run(["bash", str(script)], capture_output=True, text=True)
        except OSError as exc:
            logger.warning("Failed to update reports: %s", exc)
            return False

        if result.returncode != 0:
            logger.warning("Failed to update reports (exit %d): %s", result.returncode, result.stderr.strip())
            return False
        logger.info("Reports regenerated via %s", script)
        return True
