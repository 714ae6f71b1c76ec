"""Application workflows for ledger transactions and reports."""

from ledger_api.application.reports import ReportEngine, ReportService
from ledger_api.application.results import ErrorKind, LedgerResult
from ledger_api.application.transactions import (
    PayloadError,
    TransactionService,
    transaction_from_payload,
)

__all__ = [
    "ErrorKind",
    "LedgerResult",
    "PayloadError",
    "ReportEngine",
    "ReportService",
    "TransactionService",
    "transaction_from_payload",
]
