"""Transaction read and edit workflows over the ledger file."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ledger_api.application.results import ErrorKind, LedgerResult
from ledger_api.domain import (
    Posting,
    Transaction,
    TransactionIndexError,
    append_transaction,
    parse_transactions,
    splice_transaction,
)
from ledger_api.ledger_access import LedgerIOError, LedgerStore
from ledger_api.runtime import get_logger

logger = get_logger(__name__)

NOT_FOUND_MESSAGE = "Transaction not found"
_LINE_BREAKS = ("\n", "\r")


class PayloadError(ValueError):
    """Raised when a write payload is missing required transaction data."""


def _optional_text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise PayloadError(f"Invalid posting data: '{key}' must be a string")
    return value


def _single_line(value: str, field: str) -> str:
    if any(brk in value for brk in _LINE_BREAKS):
        raise PayloadError(f"Invalid transaction data: '{field}' must not contain line breaks")
    return value


def _flag(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key, False)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise PayloadError(f"Invalid transaction data: '{key}' must be a boolean")
    return value


def transaction_from_payload(payload: Any) -> Transaction:
    """Validate a write payload and build the transaction it describes.

    Expected shape::

        {"date": "2024/01/01", "payee": "Grocery", "isCleared": true,
         "postings": [{"account": "Expenses:Food", "amount": "$50"}]}

    Raises:
        PayloadError: If date, payee or postings are missing or empty, a
            posting has no account, or any text field spans several lines.
    """
    if not isinstance(payload, Mapping):
        raise PayloadError("Invalid transaction data: expected a JSON object")

    date = payload.get("date")
    payee = payload.get("payee")
    postings = payload.get("postings")
    if (
        not isinstance(date, str)
        or not date.strip()
        or not isinstance(payee, str)
        or not payee.strip()
        or not isinstance(postings, list)
        or not postings
    ):
        raise PayloadError("Invalid transaction data: missing required fields")
    _single_line(date, "date")
    _single_line(payee, "payee")

    cleared = _flag(payload, "isCleared")
    pending = _flag(payload, "isPending")
    if cleared and pending:
        raise PayloadError("Invalid transaction data: a transaction cannot be both cleared and pending")

    parsed_postings: list[Posting] = []
    for posting in postings:
        if not isinstance(posting, Mapping):
            raise PayloadError("Invalid posting data: expected a JSON object")
        account = posting.get("account")
        if not isinstance(account, str) or not account.strip():
            raise PayloadError("Invalid posting data: missing account")
        parsed_postings.append(
            Posting(
                account=_single_line(account, "account"),
                amount=_single_line(_optional_text(posting, "amount"), "amount"),
                comment=_single_line(_optional_text(posting, "comment"), "comment"),
            )
        )

    return Transaction(
        date=date,
        payee=payee,
        cleared=cleared,
        pending=pending,
        postings=parsed_postings,
    )


class TransactionService:
    """List, fetch, add, update and delete transactions in one ledger file.

    Indexes address transactions in file order. The list view is reversed
    (most recent first) and is not index-compatible with the other calls.
    """

    def __init__(self, store: LedgerStore) -> None:
        self.store = store

    def _parse(self) -> list[Transaction]:
        transactions = parse_transactions(self.store.read())
        logger.debug("Parsed %d transactions from %s", len(transactions), self.store.ledger_path)
        return transactions

    def list_transactions(self, limit: int = 0) -> LedgerResult:
        """Return transactions most recent first, truncated to ``limit`` when > 0."""
        try:
            transactions = self._parse()
        except LedgerIOError as exc:
            return LedgerResult.failure(ErrorKind.IO, str(exc))

        transactions.reverse()
        if limit > 0:
            transactions = transactions[:limit]
        return LedgerResult.success([txn.to_dict() for txn in transactions])

    def get_transaction(self, index: int) -> LedgerResult:
        try:
            transactions = self._parse()
        except LedgerIOError as exc:
            return LedgerResult.failure(ErrorKind.IO, str(exc))

        if index < 0 or index >= len(transactions):
            return LedgerResult.failure(ErrorKind.NOT_FOUND, NOT_FOUND_MESSAGE)
        return LedgerResult.success(transactions[index].to_dict())

    def add_transaction(self, payload: Any) -> LedgerResult:
        """Validate ``payload`` and append it to the end of the ledger."""
        try:
            transaction = transaction_from_payload(payload)
        except PayloadError as exc:
            return LedgerResult.failure(ErrorKind.VALIDATION, str(exc))

        try:
            with self.store.lock:
                content = self.store.read()
                self.store.write(append_transaction(content, transaction))
        except LedgerIOError as exc:
            return LedgerResult.failure(ErrorKind.IO, str(exc))

        logger.info("Added transaction %s %s", transaction.date, transaction.payee)
        return LedgerResult.success(message="Transaction added successfully")

    def update_transaction(self, index: int, payload: Any) -> LedgerResult:
        """Replace the transaction at file-order ``index`` in place."""
        try:
            transaction = transaction_from_payload(payload)
        except PayloadError as exc:
            return LedgerResult.failure(ErrorKind.VALIDATION, str(exc))

        return self._splice(index, transaction, "Transaction updated successfully")

    def delete_transaction(self, index: int) -> LedgerResult:
        """Remove the transaction at file-order ``index``."""
        return self._splice(index, None, "Transaction deleted successfully")

    def _splice(self, index: int, replacement: Transaction | None, message: str) -> LedgerResult:
        try:
            with self.store.lock:
                content = self.store.read()
                new_content = splice_transaction(content, index, replacement)
                self.store.write(new_content)
        except TransactionIndexError as exc:
            logger.debug("Rejected edit: %s", exc)
            return LedgerResult.failure(ErrorKind.NOT_FOUND, NOT_FOUND_MESSAGE)
        except LedgerIOError as exc:
            return LedgerResult.failure(ErrorKind.IO, str(exc))

        action = "Deleted" if replacement is None else "Updated"
        logger.info("%s transaction at index %d", action, index)
        return LedgerResult.success(message=message)
