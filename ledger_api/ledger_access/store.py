"""Privileged read/write access to the ledger file.

This module is the single place that touches the ledger file on disk. Every
overwrite first refreshes the ``.bak`` recovery copy, then replaces the ledger
atomically so a failed write never leaves a half-written file behind.
"""

from __future__ import annotations

import os
import shutil
import tempfile
import threading
from pathlib import Path

from ledger_api.runtime import get_logger

logger = get_logger(__name__)

BACKUP_SUFFIX = ".bak"


class LedgerIOError(OSError):
    """Raised when the ledger file or its backup cannot be read or written."""


class LedgerStore:
    """Read and rewrite one ledger file.

    ``lock`` serializes read-modify-write sequences within this process;
    callers hold it around parse, edit and :meth:`write` for one request.
    """

    def __init__(self, ledger_path: Path | str, backup_path: Path | str | None = None) -> None:
        self.ledger_path = Path(ledger_path)
        if backup_path is None:
            backup_path = self.ledger_path.with_name(self.ledger_path.name + BACKUP_SUFFIX)
        self.backup_path = Path(backup_path)
        self.lock = threading.Lock()

    def read(self) -> str:
        """Return the full ledger text."""
        try:
            with open(self.ledger_path, encoding="utf-8", newline="") as f:
                return f.read()
        except UnicodeDecodeError as exc:
            logger.error("Ledger file %s is not valid UTF-8: %s", self.ledger_path, exc)
            raise LedgerIOError(f"Ledger file is not valid UTF-8: {self.ledger_path}") from exc
        except OSError as exc:
            logger.error("Failed to read ledger file %s: %s", self.ledger_path, exc)
            raise LedgerIOError(f"Failed to open ledger file: {self.ledger_path}") from exc

    def backup(self) -> None:
        """Copy the current ledger to the recovery file, overwriting it."""
        try:
            shutil.copyfile(self.ledger_path, self.backup_path)
        except OSError as exc:
            logger.error("Failed to back up %s to %s: %s", self.ledger_path, self.backup_path, exc)
            raise LedgerIOError(f"Failed to back up ledger file: {self.ledger_path}") from exc

    def write(self, content: str) -> None:
        """Back up the ledger, then atomically replace it with ``content``."""
        self.backup()

        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.ledger_path.name}.",
                suffix=".tmp",
                dir=self.ledger_path.parent,
            )
        except OSError as exc:
            logger.error("Failed to create temp file next to %s: %s", self.ledger_path, exc)
            raise LedgerIOError(f"Failed to write to ledger file: {self.ledger_path}") from exc

        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            shutil.copymode(self.ledger_path, tmp_path)
            os.replace(tmp_path, self.ledger_path)
        except (OSError, UnicodeEncodeError) as exc:
            tmp_path.unlink(missing_ok=True)
            logger.error("Failed to write ledger file %s: %s", self.ledger_path, exc)
            raise LedgerIOError(f"Failed to write to ledger file: {self.ledger_path}") from exc

        logger.debug("Wrote %d characters to %s", len(content), self.ledger_path)
