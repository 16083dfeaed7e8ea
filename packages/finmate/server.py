"""HTTP boundary for FinMate.

Routes
------
- ``GET /``: health.
- ``POST /api/parse-fields``: structured extraction. Always 200 with
  ``{parsed, raw, modelResponse}``, even when degraded; 400 for missing
  ``text``; 500 for missing service credentials.
- ``POST /api/budget``: role-based allocation.
- ``POST /api/metrics``: role success metric.
- ``POST /api/suggestions``: weekly spending suggestion (always 200).
- ``POST /api/portfolio``: investment totals.
"""

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .budget import allocate
from .errors import ClientError, ConfigurationError
from .extraction import extract_fields
from .logging_setup import configure_logging, get_logger
from .metrics import evaluate
from .models import (
    CamelModel,
    ExpenseRecord,
    ExtractionRequest,
    FixedExpense,
    Goal,
    Investment,
    Role,
)
from .portfolio import portfolio_metrics
from .profile import fixed_expenses_total
from .suggestions import get_spending_suggestion

_logger = get_logger("finmate.server")


class BudgetRequest(CamelModel):
    income: float = 0.0
    fixed_expenses_total: float | None = None
    fixed_expenses: list[FixedExpense] = Field(default_factory=list)
    role: str = Role.UNSET.value


class MetricsRequest(CamelModel):
    role: str = Role.UNSET.value
    income: float = 0.0
    actual_savings: float = 0.0
    daily_spending_limit: float = 0.0
    average_daily_spending: float = 0.0
    monthly_variance: float = 0.0


class SuggestionRequest(CamelModel):
    income: float = 0.0
    role: str = Role.UNSET.value
    goals: list[Goal] = Field(default_factory=list)
    expenses_data: list[ExpenseRecord] = Field(default_factory=list)


class PortfolioRequest(BaseModel):
    investments: list[Investment] = Field(default_factory=list)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@asynccontextmanager
async def _lifespan(_app: FastAPI) -> AsyncIterator[None]:
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()
    yield


def create_app() -> FastAPI:
    """Build the application.

    ``.env`` loading and logging configuration happen at server startup, not
    here, so importing this module has no side effects.
    """

    app = FastAPI(title="FinMate API", lifespan=_lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ClientError)
    async def _client_error(_request: Request, exc: ClientError) -> JSONResponse:
        return _error(400, str(exc))

    @app.exception_handler(ConfigurationError)
    async def _configuration_error(_request: Request, exc: ConfigurationError) -> JSONResponse:
        _logger.error("configuration error: %s", exc)
        return _error(500, str(exc))

    @app.get("/")
    def root() -> dict[str, str]:
        return {"status": "ok", "service": "FinMate API"}

    @app.post("/api/parse-fields")
    def parse_fields(req: ExtractionRequest | None = None) -> dict[str, Any]:
        req = req or ExtractionRequest()
        result = extract_fields(req.text, req.target_form)
        return result.to_payload()

    @app.post("/api/budget")
    def budget(req: BudgetRequest) -> dict[str, Any]:
        total = req.fixed_expenses_total
        if total is None:
            total = fixed_expenses_total(req.fixed_expenses)
        return allocate(req.income, total, req.role).model_dump(by_alias=True)

    @app.post("/api/metrics")
    def metrics(req: MetricsRequest) -> dict[str, Any]:
        metric = evaluate(
            req.role,
            req.income,
            req.actual_savings,
            req.daily_spending_limit,
            req.average_daily_spending,
            req.monthly_variance,
        )
        return metric.model_dump(by_alias=True)

    @app.post("/api/suggestions")
    def suggestions(req: SuggestionRequest) -> dict[str, str]:
        result = get_spending_suggestion(
            income=req.income, role=req.role, goals=req.goals, expenses=req.expenses_data
        )
        return result.model_dump()

    @app.post("/api/portfolio")
    def portfolio(req: PortfolioRequest) -> dict[str, Any]:
        return portfolio_metrics(req.investments).model_dump(by_alias=True)

    return app


app = create_app()


def main() -> None:  # pragma: no cover - process entrypoint
    import uvicorn

    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)


if __name__ == "__main__":  # pragma: no cover
    main()
