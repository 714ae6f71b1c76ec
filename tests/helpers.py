"""Sample ledger text and fakes shared by the test modules."""

from __future__ import annotations

from collections.abc import Sequence

from ledger_api.ledger_access import LedgerEngineError

SAMPLE_LEDGER = (
    "; Personal ledger\n"
    "\n"
    "2024/01/01 * Opening Balance\n"
    "  Assets:Checking  $1000\n"
    "  Equity:Opening\n"
    "\n"
    "2024/01/05 ! Grocery Store\n"
    "  Expenses:Food  $50\n"
    "  ; receipt in drawer\n"
    "  Assets:Checking\n"
)


class FakeEngine:
    """Stand-in for the ledger binary: canned output keyed by report args."""

    def __init__(self, outputs: dict[tuple[str, ...], str] | None = None, fail: bool = False) -> None:
        self.outputs = outputs or {}
        self.fail = fail
        self.calls: list[tuple[str, ...]] = []
        self.regenerations = 0

    def run(self, args: Sequence[str]) -> str:
        self.calls.append(tuple(args))
        if self.fail:
            raise LedgerEngineError("ledger: command not found")
        return self.outputs.get(tuple(args), "")

    def regenerate_reports(self) -> bool:
        self.regenerations += 1
        return True
