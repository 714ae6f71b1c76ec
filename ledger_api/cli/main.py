#!/usr/bin/env python3

import argparse
import json
from collections.abc import Sequence

from ledger_api.runtime import LEVEL_NAMES, ApiConfig, ConfigError, load_config, set_log_level


def _load(args: argparse.Namespace) -> ApiConfig | None:
    try:
        return load_config(args.config)
    except ConfigError as exc:
        print(f"Error: {exc}")
        return None


def cmd_serve(args: argparse.Namespace, config: ApiConfig) -> int:
    """Start the FastAPI server for the configured ledger file."""
    import uvicorn

    from ledger_api.runtime.server import create_app

    host = args.host or config.host
    port = args.port or config.port

    print(f"Starting ledger API server on {host}:{port}")
    print(f"Ledger file: {config.ledger_file}")
    print("Press Ctrl+C to stop")

    uvicorn.run(create_app(config), host=host, port=port)
    return 0


def cmd_transactions(args: argparse.Namespace, config: ApiConfig) -> int:
    """Print transactions, most recent first, as JSON."""
    from ledger_api.application import TransactionService
    from ledger_api.ledger_access import LedgerStore

    service = TransactionService(LedgerStore(config.ledger_file, config.backup_file))
    result = service.list_transactions(args.limit)
    if not result.ok:
        print(f"Error: {result.error}")
        return 1
    print(json.dumps(result.value, indent=2))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="REST API over a plain-text ledger file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  serve [--host] [--port]    Start the ledger API server
  transactions [--limit N]   Print transactions (most recent first) as JSON

Config is read from --config, $LEDGER_API_CONFIG or ./ledger_api.toml.
""",
    )
    parser.add_argument("--config", default=None, help="Path to TOML config file")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=sorted(LEVEL_NAMES),
        default=None,
        help="Log level (default: log_level from config, else $LEDGER_API_LOG_LEVEL)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Start the ledger API server")
    serve_parser.add_argument("--host", default=None, help="Host to bind to (default: from config)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port to bind to (default: from config)")

    list_parser = subparsers.add_parser("transactions", help="Print transactions as JSON")
    list_parser.add_argument("--limit", type=int, default=0, help="Only show the N most recent transactions")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    config = _load(args)
    if config is None:
        return 1

    log_level = args.log_level or config.log_level
    if log_level:
        set_log_level(log_level)

    if args.command == "serve":
        return cmd_serve(args, config)
    if args.command == "transactions":
        return cmd_transactions(args, config)

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
