"""FastAPI server exposing the ledger file as a REST API."""

from __future__ import annotations

import json
import re
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import BackgroundTasks, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware

from ledger_api.application import ErrorKind, LedgerResult, ReportService, TransactionService
from ledger_api.ledger_access import LedgerEngine, LedgerStore
from ledger_api.runtime.config import ApiConfig
from ledger_api.runtime.logging import get_logger

logger = get_logger(__name__)

_LEADING_INT_RE = re.compile(r"\s*[+-]?\d+", re.ASCII)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "X-Requested-With, Content-Type, Accept, Authorization",
}

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.IO: 500,
    ErrorKind.EXTERNAL: 502,
}


class CorsHeadersMiddleware(BaseHTTPMiddleware):
    """Attach permissive CORS headers to every response."""

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response


def error_response(kind: ErrorKind, error: str) -> JSONResponse:
    return JSONResponse({"error": error, "kind": kind.value}, status_code=STATUS_BY_KIND[kind])


def result_response(result: LedgerResult, success_status: int = 200) -> JSONResponse:
    """Map a workflow result to a JSON response through ``STATUS_BY_KIND``."""
    if not result.ok:
        return error_response(result.kind or ErrorKind.IO, result.error or "Unknown error")
    if result.message is not None:
        return JSONResponse({"message": result.message}, status_code=success_status)
    return JSONResponse(result.value, status_code=success_status)


def _parse_index(raw: str) -> int | None:
    try:
        return int(raw)
    except ValueError:
        return None


def _parse_limit(raw: str | None) -> int:
    """Read the leading integer of ``raw``; anything unparsable means no limit."""
    if raw is None:
        return 0
    match = _LEADING_INT_RE.match(raw)
    return int(match.group()) if match else 0


async def _read_json(request: Request) -> tuple[Any, JSONResponse | None]:
    body = await request.body()
    try:
        return json.loads(body), None
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        return None, error_response(ErrorKind.VALIDATION, f"Invalid JSON: {exc}")


def create_app(
    config: ApiConfig,
    *,
    transactions: TransactionService | None = None,
    reports: ReportService | None = None,
) -> FastAPI:
    """Build the API app for one ledger file.

    Services are constructed from ``config`` unless supplied, which lets tests
    inject fakes for the external ledger engine.
    """
    if transactions is None:
        transactions = TransactionService(LedgerStore(config.ledger_file, config.backup_file))
    if reports is None:
        reports = ReportService(LedgerEngine.from_config(config))

    app = FastAPI(title="Ledger API")
    app.add_middleware(CorsHeadersMiddleware)
    app.state.config = config
    app.state.transactions = transactions
    app.state.reports = reports

    @app.get("/api/summary")
    def get_summary() -> JSONResponse:
        return result_response(reports.summary())

    @app.get("/api/transactions")
    def list_transactions(limit: str | None = None) -> JSONResponse:
        return result_response(transactions.list_transactions(_parse_limit(limit)))

    @app.get("/api/accounts")
    def get_accounts() -> JSONResponse:
        return result_response(reports.accounts())

    @app.get("/api/balance")
    def get_balance() -> JSONResponse:
        return result_response(reports.balance())

    @app.get("/api/register")
    def get_register() -> JSONResponse:
        return result_response(reports.register())

    @app.get("/api/budget")
    def get_budget() -> JSONResponse:
        return result_response(reports.budget())

    @app.get("/api/cleared")
    def get_cleared() -> JSONResponse:
        return result_response(reports.cleared())

    @app.get("/api/transactions/{index}")
    def get_transaction(index: str) -> JSONResponse:
        parsed = _parse_index(index)
        if parsed is None:
            return error_response(ErrorKind.VALIDATION, "Invalid transaction index")
        return result_response(transactions.get_transaction(parsed))

    @app.post("/api/transactions")
    async def add_transaction(request: Request, background_tasks: BackgroundTasks) -> JSONResponse:
        payload, invalid = await _read_json(request)
        if invalid is not None:
            return invalid
        result = await run_in_threadpool(transactions.add_transaction, payload)
        if result.ok:
            background_tasks.add_task(reports.regenerate)
        return result_response(result, success_status=201)

    @app.put("/api/transactions/{index}")
    async def update_transaction(index: str, request: Request, background_tasks: BackgroundTasks) -> JSONResponse:
        parsed = _parse_index(index)
        if parsed is None:
            return error_response(ErrorKind.VALIDATION, "Invalid transaction index")
        payload, invalid = await _read_json(request)
        if invalid is not None:
            return invalid
        result = await run_in_threadpool(transactions.update_transaction, parsed, payload)
        if result.ok:
            background_tasks.add_task(reports.regenerate)
        return result_response(result)

    @app.delete("/api/transactions/{index}")
    def delete_transaction(index: str, background_tasks: BackgroundTasks) -> JSONResponse:
        parsed = _parse_index(index)
        if parsed is None:
            return error_response(ErrorKind.VALIDATION, "Invalid transaction index")
        result = transactions.delete_transaction(parsed)
        if result.ok:
            background_tasks.add_task(reports.regenerate)
        return result_response(result)

    @app.options("/api/{path:path}")
    async def preflight(path: str) -> Response:
        return Response(status_code=200)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok"}

    logger.debug("Created app for ledger %s", config.ledger_file)
    return app


if __name__ == "__main__":
    import uvicorn

    from ledger_api.runtime.config import load_config

    _config = load_config()
    uvicorn.run(create_app(_config), host=_config.host, port=_config.port)
