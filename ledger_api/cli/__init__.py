"""Command-line interface for the ledger API.

Usage:
    ledger-api serve [--host HOST] [--port PORT]
    ledger-api transactions [--limit N]
    ledger-api --config ledger_api.toml serve
"""
