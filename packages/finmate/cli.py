"""CLI for the ``finmate`` package.

Typer-based console interface over the allocation, metric and extraction
operations. Environment variables (credentials, model ids) are loaded from a
local ``.env`` with ``python-dotenv`` before any command runs. Business logic
lives in the library modules; commands only parse options and render output.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .budget import allocate, get_role_budget_split
from .errors import ClientError, ConfigurationError
from .logging_setup import configure_logging
from .metrics import evaluate
from .models import Role, TargetForm

console = Console()

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    help="FinMate budgeting and receipt extraction tools.",
)


def _role_option_help() -> str:
    return "User role: " + ", ".join(r.value for r in Role if r is not Role.UNSET)


@app.command("allocate")
def allocate_cmd(
    income: float = typer.Option(..., help="Monthly income."),
    fixed: float = typer.Option(0.0, "--fixed", help="Total of fixed monthly expenses."),
    role: str = typer.Option("Professional", help=_role_option_help()),
) -> None:
    """Print the needs/wants/savings split and daily limit."""

    result = allocate(income, fixed, role)
    split = get_role_budget_split(role)

    table = Table(title=f"Budget for {Role.coerce(role).value or 'Professional (default)'}")
    table.add_column("Bucket")
    table.add_column("Target %", justify="right")
    table.add_column("Monthly", justify="right")
    table.add_row("Needs", f"{split.needs_percent:.0%}", f"{result.monthly_needs:,.2f}")
    table.add_row("Wants", f"{split.wants_percent:.0%}", f"{result.monthly_wants:,.2f}")
    table.add_row("Savings", f"{split.savings_percent:.0%}", f"{result.monthly_savings:,.2f}")
    console.print(table)
    console.print(f"Daily limit: {result.daily_limit:,.2f}")


@app.command("evaluate")
def evaluate_cmd(
    role: str = typer.Option("Professional", help=_role_option_help()),
    income: float = typer.Option(0.0, help="Monthly income."),
    savings: float = typer.Option(0.0, help="Actual savings this month."),
    daily_limit: float = typer.Option(0.0, "--daily-limit", help="Daily spending limit."),
    avg_daily: float = typer.Option(0.0, "--avg-daily", help="Average daily spending."),
    variance: float = typer.Option(0.0, help="Spread of monthly spending."),
) -> None:
    """Print the role-specific success metric."""

    metric = evaluate(role, income, savings, daily_limit, avg_daily, variance)
    console.print(f"[bold]{metric.metric_name}[/bold]")
    console.print(f"Value: {metric.metric_value} (target {metric.metric_target})")
    console.print(f"Success rate: {metric.success_rate}%")
    console.print(metric.interpretation)


@app.command("parse")
def parse_cmd(
    text: str = typer.Argument(..., help="Free text (e.g. OCR output of a receipt)."),
    target: TargetForm = typer.Option(TargetForm.EXPENSE, help="Form to fill."),
) -> None:
    """Extract form fields from TEXT and print the JSON result."""

    from .extraction import extract_fields

    try:
        result = extract_fields(text, target)
    except (ClientError, ConfigurationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        raise typer.Exit(1) from e
    typer.echo(json.dumps(result.to_payload(), indent=2, ensure_ascii=False, default=str))


@app.command("serve")
def serve_cmd(
    host: str = typer.Option("127.0.0.1", help="Bind address."),
    port: int = typer.Option(8000, help="Bind port."),
) -> None:
    """Run the HTTP API with uvicorn."""

    import uvicorn

    uvicorn.run("finmate.server:app", host=host, port=port)


@app.callback(invoke_without_command=True)
def _root(ctx: typer.Context) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures package logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()

    if ctx.invoked_subcommand is None:
        typer.echo("No subcommand provided. Use --help to see available commands.")
        raise typer.Exit(1)


if __name__ == "__main__":  # pragma: no cover
    app()
