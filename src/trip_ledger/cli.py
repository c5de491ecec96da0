"""CLI for Trip Ledger."""

import typer

from .settlement.cli import app as settle_app

app = typer.Typer(
    name="trip-ledger",
    help="Shared-expense settlement for trips",
)

app.add_typer(settle_app, name="settle", help="Monthly debt settlement")


if __name__ == "__main__":
    app()
