"""Data models for ledger transactions."""

from dataclasses import dataclass, field
from typing import Any

# Start line of a transaction that has not seen its header yet.
UNSET_LINE = -1


@dataclass
class Posting:
    """A single account line under a transaction."""

    account: str
    amount: str = ""  # Empty means the amount is elided and inferred by ledger
    comment: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"account": self.account, "amount": self.amount, "comment": self.comment}


@dataclass
class Transaction:
    """One dated ledger entry."""

    date: str = ""
    payee: str = ""
    cleared: bool = False
    pending: bool = False
    postings: list[Posting] = field(default_factory=list)
    start_line: int = UNSET_LINE  # 0-based header line in the source text

    @property
    def is_open(self) -> bool:
        return self.start_line != UNSET_LINE

    def to_dict(self) -> dict[str, Any]:
        """JSON shape served by the API. ``start_line`` stays internal."""
        return {
            "date": self.date,
            "cleared": self.cleared,
            "pending": self.pending,
            "payee": self.payee,
            "postings": [posting.to_dict() for posting in self.postings],
        }
