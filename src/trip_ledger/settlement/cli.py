"""CLI commands for settling a trip's expenses."""

import json
import logging
import sys
from pathlib import Path

import typer
from pydantic import TypeAdapter
from pydantic import ValidationError as SchemaError
from rich.console import Console
from rich.markup import escape

from ..config import load_settings
from ..exceptions import TripLedgerError
from ..models import Expense, MonthlyBalance
from .service import SettlementService
from .ui import print_balances

app = typer.Typer(
    name="settle",
    help="Settle shared trip expenses into monthly debts",
)

console = Console()

_expenses_adapter = TypeAdapter(list[Expense])
_balances_adapter = TypeAdapter(list[MonthlyBalance])


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def load_expenses(path: Path) -> list[Expense]:
    """
    Load expenses from a JSON export.

    The file holds either a list of expenses or an object with an
    ``expenses`` list, using the host's camelCase field names.

    Args:
        path: Path to the JSON file

    Returns:
        Parsed expenses
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("expenses", [])
    return _expenses_adapter.validate_python(data)


def _print_error(message: str) -> None:
    console.print(f"\n[bold red]Error:[/bold red] {escape(message)}")


@app.command()
def run(
    expenses_file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="JSON file of the trip's expenses"
    ),
    month: str | None = typer.Option(
        None, "--month", "-m", help="Only settle this month (YYYY-MM)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print balances as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Compute who owes whom, month by month.

    Each currency is netted on its own; debts of different currencies in
    the same month are listed together but never offset.
    """
    setup_logging(verbose)

    try:
        service = SettlementService(load_settings())
        expenses = load_expenses(expenses_file)

        if month:
            balances = [service.monthly_balance(expenses, month)]
        else:
            balances = service.settle(expenses)

        if as_json:
            typer.echo(_balances_adapter.dump_json(balances, by_alias=True).decode())
        else:
            print_balances(console, balances)

    except (json.JSONDecodeError, SchemaError) as e:
        _print_error(f"Could not read {expenses_file}: {e}")
        sys.exit(1)
    except (TripLedgerError, ValueError) as e:
        _print_error(str(e))
        if verbose:
            raise
        sys.exit(1)


@app.command()
def key(
    expenses_file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="JSON file of the trip's expenses"
    ),
    trip_id: str | None = typer.Option(
        None, "--trip-id", help="Trip id (defaults to the expenses' trip)"
    ),
):
    """Print the cache key of a trip's expense set."""
    try:
        expenses = load_expenses(expenses_file)
    except (json.JSONDecodeError, SchemaError) as e:
        _print_error(f"Could not read {expenses_file}: {e}")
        sys.exit(1)

    if trip_id is None:
        if not expenses:
            console.print(
                "[yellow]No expenses found; pass --trip-id explicitly.[/yellow]"
            )
            sys.exit(1)
        trip_id = expenses[0].trip_id

    typer.echo(SettlementService().cache_key(trip_id, expenses))
