"""Parse, format and splice transactions in ledger file text.

Parsing never copies original text into the output: writes always regenerate
the edited transaction with :func:`format_transaction`. Splicing keeps every
line outside the edited transaction's range byte-identical.
"""

from __future__ import annotations

import re

from ledger_api.domain.transaction import Posting, Transaction

_WHITESPACE = " \t\n\r\f\v"
_HEADER_RE = re.compile(r"(\d{4}/\d{2}/\d{2})\s+(\*|\!)?\s*(.*)", re.ASCII)
_AMOUNT_COLUMN = 50
_MIN_AMOUNT_GAP = 2


class TransactionIndexError(IndexError):
    """Raised when a transaction index is outside the parsed range."""

    def __init__(self, index: int, count: int) -> None:
        super().__init__(f"Transaction index {index} out of range (0..{count - 1})")
        self.index = index
        self.count = count


def split_lines(content: str) -> list[str]:
    """Split on newlines; a trailing newline does not add an empty last line."""
    if not content:
        return []
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def _find_whitespace_run(text: str) -> int | None:
    for i in range(len(text) - 1):
        if text[i] in _WHITESPACE and text[i + 1] in _WHITESPACE:
            return i
    return None


def parse_posting(line: str) -> Posting:
    """Split a trimmed posting line into account and amount.

    The amount starts at the first ``$`` when it comes before the first run of
    two whitespace characters, otherwise at that run. Anything after a ``;`` in
    the amount is dropped and never becomes the posting comment.
    """
    dollar_pos = line.find("$")
    space_pos = _find_whitespace_run(line)

    split_pos: int | None = None
    if dollar_pos != -1 and (space_pos is None or dollar_pos < space_pos):
        split_pos = dollar_pos
    elif space_pos is not None:
        split_pos = space_pos

    if split_pos is None:
        return Posting(account=line)

    rest = line[split_pos:]
    comment_pos = rest.find(";")
    if comment_pos != -1:
        rest = rest[:comment_pos]
    return Posting(account=line[:split_pos].strip(_WHITESPACE), amount=rest.strip(_WHITESPACE))


def parse_transactions(content: str) -> list[Transaction]:
    """Recover transactions, in file order, from ledger text."""
    transactions: list[Transaction] = []
    current = Transaction()

    for line_num, line in enumerate(split_lines(content)):
        trimmed = line.strip(_WHITESPACE)
        if not trimmed:
            continue

        header = _HEADER_RE.fullmatch(trimmed)
        if header:
            if current.is_open:
                transactions.append(current)
            marker = header.group(2)
            current = Transaction(
                date=header.group(1),
                payee=header.group(3),
                cleared=marker == "*",
                pending=marker == "!",
                start_line=line_num,
            )
            continue

        if line[0] not in _WHITESPACE:
            continue
        if not current.is_open or trimmed.startswith(";"):
            continue
        current.postings.append(parse_posting(trimmed))

    if current.is_open:
        transactions.append(current)
    return transactions


def format_transaction(transaction: Transaction) -> str:
    """Render a transaction as canonical ledger text, one newline per line."""
    if transaction.cleared:
        marker = "* "
    elif transaction.pending:
        marker = "! "
    else:
        marker = ""
    lines = [f"{transaction.date} {marker}{transaction.payee}"]

    for posting in transaction.postings:
        line = f"  {posting.account}"
        if posting.amount:
            padding = max(_MIN_AMOUNT_GAP, _AMOUNT_COLUMN - len(posting.account))
            line += " " * padding + posting.amount
        if posting.comment:
            line += f"  ; {posting.comment}"
        lines.append(line)

    return "".join(f"{line}\n" for line in lines)


def transaction_line_range(transactions: list[Transaction], index: int) -> tuple[int, int | None]:
    """Return ``(start, end)`` lines of a transaction, inclusive.

    ``end`` is None when the transaction runs through the end of the file.
    Trailing blank and comment lines up to the next header belong to the range.
    """
    if index < 0 or index >= len(transactions):
        raise TransactionIndexError(index, len(transactions))
    start = transactions[index].start_line
    if index + 1 < len(transactions):
        return start, transactions[index + 1].start_line - 1
    return start, None


def splice_transaction(content: str, index: int, replacement: Transaction | None) -> str:
    """Replace (or delete, when ``replacement`` is None) one transaction's lines."""
    start, end = transaction_line_range(parse_transactions(content), index)
    lines = split_lines(content)

    parts = [f"{line}\n" for line in lines[:start]]
    if replacement is not None:
        parts.append(format_transaction(replacement))
    if end is not None:
        parts.extend(f"{line}\n" for line in lines[end + 1 :])
    return "".join(parts)


def append_transaction(content: str, transaction: Transaction) -> str:
    """Append a formatted transaction after a separating blank line."""
    return content + "\n" + format_transaction(transaction)
