"""Rich rendering of settlement results for the terminal."""

from rich.console import Console
from rich.table import Table

from ..models import MonthlyBalance


def build_balance_table(balance: MonthlyBalance) -> Table:
    """Build a table of one month's debts."""
    table = Table(title=f"Settlement for {balance.month}")
    table.add_column("Debtor", style="red")
    table.add_column("Creditor", style="green")
    table.add_column("Amount", justify="right")
    table.add_column("Currency", style="cyan")

    for debt in balance.debts:
        table.add_row(debt.debtor_id, debt.creditor_id, str(debt.amount), debt.currency)

    return table


def print_balances(console: Console, balances: list[MonthlyBalance]) -> None:
    """Print a table per month, or a note when a month is already settled."""
    if not balances:
        console.print("[yellow]No expenses to settle.[/yellow]")
        return

    for balance in balances:
        if balance.debts:
            console.print(build_balance_table(balance))
        else:
            console.print(f"[green]{balance.month}: everyone is settled up.[/green]")
