"""REST API over a plain-text ledger file."""

__version__ = "0.1.0"
