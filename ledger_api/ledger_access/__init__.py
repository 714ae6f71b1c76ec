"""Centralized access to the ledger file and the external ledger engine."""

from ledger_api.ledger_access.engine import LedgerEngine, LedgerEngineError
from ledger_api.ledger_access.store import BACKUP_SUFFIX, LedgerIOError, LedgerStore

__all__ = [
    "BACKUP_SUFFIX",
    "LedgerEngine",
    "LedgerEngineError",
    "LedgerIOError",
    "LedgerStore",
]
