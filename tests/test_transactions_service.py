"""Tests for transaction workflows over a real ledger file."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from ledger_api.application import (
    ErrorKind,
    PayloadError,
    TransactionService,
    transaction_from_payload,
)
from ledger_api.domain import format_transaction, parse_transactions
from ledger_api.ledger_access import LedgerStore
from tests.helpers import SAMPLE_LEDGER


def _payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "date": "2024/02/01",
        "payee": "Coffee Shop",
        "isCleared": True,
        "postings": [
            {"account": "Expenses:Coffee", "amount": "$4.50", "comment": "latte"},
            {"account": "Assets:Cash"},
        ],
    }
    payload.update(overrides)
    return payload


def _service(path: Path) -> TransactionService:
    return TransactionService(LedgerStore(path))


def test_transaction_from_payload_builds_postings() -> None:
    txn = transaction_from_payload(_payload())

    assert txn.cleared is True
    assert txn.pending is False
    assert [(p.account, p.amount, p.comment) for p in txn.postings] == [
        ("Expenses:Coffee", "$4.50", "latte"),
        ("Assets:Cash", "", ""),
    ]


@pytest.mark.parametrize(
    "payload",
    [
        [],
        _payload(date=""),
        _payload(payee=None),
        _payload(postings=[]),
        _payload(postings="Expenses:Coffee"),
        _payload(postings=[{"amount": "$1"}]),
        _payload(postings=[{"account": "   "}]),
        _payload(postings=[{"account": "A", "amount": 5}]),
        _payload(isCleared="yes"),
        _payload(isCleared=True, isPending=True),
        _payload(payee="B\n2024/01/02 Injected"),
        _payload(date="2024/02/01\r"),
        _payload(postings=[{"account": "Expenses:Coffee\n  Assets:Cash", "amount": "$1"}]),
        _payload(postings=[{"account": "A", "amount": "$1\n2024/01/02 X"}]),
        _payload(postings=[{"account": "A", "comment": "note\r\n  B  $2"}]),
    ],
)
def test_transaction_from_payload_rejects_invalid(payload: Any) -> None:
    with pytest.raises(PayloadError):
        transaction_from_payload(payload)


def test_list_is_reverse_of_index_order(ledger_file: Path) -> None:
    service = _service(ledger_file)

    listed = service.list_transactions().value
    by_index = [service.get_transaction(i).value for i in range(2)]

    assert listed == list(reversed(by_index))
    assert listed[0]["payee"] == "Grocery Store"
    assert service.list_transactions().value == listed


def test_list_limit(ledger_file: Path) -> None:
    service = _service(ledger_file)

    assert [t["payee"] for t in service.list_transactions(limit=1).value] == ["Grocery Store"]
    assert len(service.list_transactions(limit=0).value) == 2
    assert len(service.list_transactions(limit=-3).value) == 2
    assert len(service.list_transactions(limit=10).value) == 2


def test_get_transaction_shape(ledger_file: Path) -> None:
    result = _service(ledger_file).get_transaction(0)

    assert result.ok
    assert result.value == {
        "date": "2024/01/01",
        "cleared": True,
        "pending": False,
        "payee": "Opening Balance",
        "postings": [
            {"account": "Assets:Checking", "amount": "$1000", "comment": ""},
            {"account": "Equity:Opening", "amount": "", "comment": ""},
        ],
    }


@pytest.mark.parametrize("index", [-1, 2])
def test_get_transaction_out_of_range(ledger_file: Path, index: int) -> None:
    result = _service(ledger_file).get_transaction(index)

    assert result.status == "error"
    assert result.kind is ErrorKind.NOT_FOUND


def test_add_transaction_appends_after_blank_line(ledger_file: Path) -> None:
    service = _service(ledger_file)

    result = service.add_transaction(_payload())

    assert result.ok
    assert result.message == "Transaction added successfully"
    content = ledger_file.read_text()
    expected = format_transaction(transaction_from_payload(_payload()))
    assert content == SAMPLE_LEDGER + "\n" + expected
    assert len(parse_transactions(content)) == 3
    assert ledger_file.with_name("demo.ledger.bak").read_text() == SAMPLE_LEDGER


def test_add_invalid_payload_does_not_touch_file(ledger_file: Path) -> None:
    result = _service(ledger_file).add_transaction(_payload(postings=[]))

    assert result.kind is ErrorKind.VALIDATION
    assert ledger_file.read_text() == SAMPLE_LEDGER
    assert not ledger_file.with_name("demo.ledger.bak").exists()


def test_update_transaction_in_place(ledger_file: Path) -> None:
    service = _service(ledger_file)
    second_before = service.get_transaction(1).value

    result = service.update_transaction(0, _payload())

    assert result.ok
    assert service.get_transaction(0).value["payee"] == "Coffee Shop"
    assert service.get_transaction(1).value == second_before


def test_update_validates_before_index(ledger_file: Path) -> None:
    service = _service(ledger_file)

    assert service.update_transaction(9, _payload(date=None)).kind is ErrorKind.VALIDATION
    assert service.update_transaction(9, _payload()).kind is ErrorKind.NOT_FOUND
    assert ledger_file.read_text() == SAMPLE_LEDGER


def test_update_rejects_multiline_payee_without_touching_file(ledger_file: Path) -> None:
    service = _service(ledger_file)

    result = service.update_transaction(0, _payload(payee="B\n2024/01/02 Injected"))

    assert result.kind is ErrorKind.VALIDATION
    assert ledger_file.read_text() == SAMPLE_LEDGER
    assert len(service.list_transactions().value) == 2


def test_delete_transaction(ledger_file: Path) -> None:
    service = _service(ledger_file)

    assert service.delete_transaction(0).message == "Transaction deleted successfully"
    remaining = service.list_transactions().value
    assert [t["payee"] for t in remaining] == ["Grocery Store"]
    assert service.delete_transaction(1).kind is ErrorKind.NOT_FOUND


def test_missing_ledger_reports_io_error(tmp_path: Path) -> None:
    service = _service(tmp_path / "missing.ledger")

    assert service.list_transactions().kind is ErrorKind.IO
    assert service.get_transaction(0).kind is ErrorKind.IO
    assert service.add_transaction(_payload()).kind is ErrorKind.IO
    assert service.delete_transaction(0).kind is ErrorKind.IO
