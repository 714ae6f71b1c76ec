"""Report workflows backed by the external ledger engine.

Report failures never fail the request: they are logged and answered with an
empty list.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Protocol

from ledger_api.application.results import LedgerResult
from ledger_api.domain.report_rows import (
    account_names,
    account_rows,
    budget_rows,
    cleared_rows,
    register_rows,
)
from ledger_api.ledger_access import LedgerEngineError
from ledger_api.runtime import get_logger

logger = get_logger(__name__)

SUMMARY_ARGS = ("balance", "^Assets", "^Liabilities", "--depth", "2")
ACCOUNTS_ARGS = ("accounts",)
BALANCE_ARGS = ("balance",)
REGISTER_ARGS = ("register",)
BUDGET_ARGS = ("balance", "^Expenses", "--budget")
CLEARED_ARGS = ("balance", "--cleared", "--pending")


class ReportEngine(Protocol):
    """Minimal engine contract required by report workflows."""

    def run(self, args: Sequence[str]) -> str: ...

    def regenerate_reports(self) -> bool: ...


class ReportService:
    """Run ledger reports and shape their text output into rows."""

    def __init__(self, engine: ReportEngine) -> None:
        self.engine = engine

    def _report(self, args: Sequence[str], to_rows: Callable[[str], list[Any]]) -> LedgerResult:
        try:
            output = self.engine.run(args)
        except LedgerEngineError as exc:
            logger.warning("Report '%s' failed: %s", " ".join(args), exc)
            return LedgerResult.success([])
        return LedgerResult.success(to_rows(output))

    def summary(self) -> LedgerResult:
        return self._report(SUMMARY_ARGS, account_rows)

    def accounts(self) -> LedgerResult:
        return self._report(ACCOUNTS_ARGS, account_names)

    def balance(self) -> LedgerResult:
        return self._report(BALANCE_ARGS, account_rows)

    def register(self) -> LedgerResult:
        return self._report(REGISTER_ARGS, register_rows)

    def budget(self) -> LedgerResult:
        return self._report(BUDGET_ARGS, budget_rows)

    def cleared(self) -> LedgerResult:
        return self._report(CLEARED_ARGS, cleared_rows)

    def regenerate(self) -> None:
        """Refresh static reports after a write; never raises."""
        try:
            self.engine.regenerate_reports()
        except Exception as exc:
            logger.warning("Failed to update reports: %s", exc)
