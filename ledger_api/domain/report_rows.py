"""Pure helpers turning ledger report output into JSON-ready rows."""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import Any

_COLUMN_SEP_RE = re.compile(r"\s{2,}")


def _report_lines(output: str) -> Iterator[tuple[int, list[str]]]:
    """Yield ``(level, columns)`` for each non-blank report line.

    Level counts two spaces of indentation per step and is taken before the
    line is trimmed.
    """
    for line in output.split("\n"):
        stripped = line.strip()
        if not stripped:
            continue
        indent = len(line) - len(line.lstrip())
        yield indent // 2, _COLUMN_SEP_RE.split(stripped)


def _column(columns: list[str], idx: int) -> str:
    return columns[idx] if idx < len(columns) else ""


def account_rows(output: str) -> list[dict[str, Any]]:
    """Rows of a ``balance`` report: ``{amount, account, level}``."""
    rows: list[dict[str, Any]] = []
    for level, columns in _report_lines(output):
        if len(columns) >= 2:
            rows.append({"amount": columns[0], "account": columns[1], "level": level})
    return rows


def account_names(output: str) -> list[str]:
    """One account name per non-blank line of an ``accounts`` report."""
    return [line.strip() for line in output.split("\n") if line.strip()]


def register_rows(output: str) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for _, columns in _report_lines(output):
        if len(columns) >= 5:
            rows.append(
                {
                    "date": columns[0],
                    "payee": columns[1],
                    "account": columns[2],
                    "amount": columns[3],
                    "balance": columns[4],
                }
            )
    return rows


def budget_rows(output: str) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for level, columns in _report_lines(output):
        if len(columns) >= 4:
            rows.append(
                {
                    "actual": columns[0],
                    "budget": columns[1],
                    "remaining": columns[2],
                    "percent": columns[3],
                    "account": _column(columns, 4),
                    "level": level,
                }
            )
    return rows


def cleared_rows(output: str) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for level, columns in _report_lines(output):
        if len(columns) >= 3:
            rows.append(
                {
                    "cleared": columns[0],
                    "pending": columns[1],
                    "lastCleared": columns[2],
                    "account": _column(columns, 3),
                    "level": level,
                }
            )
    return rows
