"""Typed outcomes shared by ledger workflows."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

LedgerResultStatus = Literal["ok", "error"]


class ErrorKind(Enum):
    """Machine-readable failure categories surfaced to API callers."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    IO = "io"
    EXTERNAL = "external"


@dataclass(frozen=True)
class LedgerResult:
    """Outcome of one ledger workflow."""

    status: LedgerResultStatus
    value: Any = None
    message: str | None = None
    kind: ErrorKind | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @classmethod
    def success(cls, value: Any = None, message: str | None = None) -> LedgerResult:
        return cls(status="ok", value=value, message=message)

    @classmethod
    def failure(cls, kind: ErrorKind, error: str) -> LedgerResult:
        return cls(status="error", kind=kind, error=error)
