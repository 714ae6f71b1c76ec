"""Core domain models and pure text helpers for ledger files.

This package provides:
- Posting, Transaction: transaction data models
- parse_transactions, format_transaction: ledger text parser/formatter
- splice_transaction, append_transaction: line-range edits of ledger text

Usage:
    from ledger_api.domain import parse_transactions, splice_transaction
"""

from ledger_api.domain.ledger_text import (
    TransactionIndexError,
    append_transaction,
    format_transaction,
    parse_posting,
    parse_transactions,
    splice_transaction,
    transaction_line_range,
)
from ledger_api.domain.transaction import UNSET_LINE, Posting, Transaction

__all__ = [
    "Posting",
    "Transaction",
    "UNSET_LINE",
    "TransactionIndexError",
    "append_transaction",
    "format_transaction",
    "parse_posting",
    "parse_transactions",
    "splice_transaction",
    "transaction_line_range",
]
