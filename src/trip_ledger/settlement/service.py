"""Service layer that runs the settlement pipeline over a trip's expenses.

This module composes installment expansion, splitting, aggregation and
netting in a functional, immutable way. Every call starts from the full
expense set and returns fresh results; nothing is cached or shared.
"""

import hashlib
import json
import logging
import re
from collections.abc import Sequence
from decimal import Decimal

from ..config import Settings
from ..exceptions import ValidationError
from ..models import (
    MONTH_PATTERN,
    SPLIT_EQUAL,
    ChargeEvent,
    Expense,
    MonthlyBalance,
    MonthlyDebt,
)
from .installments import expand
from .ledger import aggregate
from .netting import netting
from .splitter import split

logger = logging.getLogger(__name__)


def validate_expense_set(expenses: Sequence[Expense]) -> None:
    """
    Check that the expenses form one trip's ledger.

    Raises:
        ValidationError: If expenses span several trips or ids repeat
    """
    if not expenses:
        return

    trip_id = expenses[0].trip_id
    seen: set[str] = set()
    for expense in expenses:
        if expense.trip_id != trip_id:
            raise ValidationError(
                expense.id,
                "tripId",
                f"belongs to trip {expense.trip_id}, expected {trip_id}",
            )
        if expense.id in seen:
            raise ValidationError(expense.id, "id", "duplicate expense id")
        seen.add(expense.id)


def _debt_sort_key(debt: MonthlyDebt) -> tuple[str, str, str]:
    return (debt.debtor_id, debt.creditor_id, debt.currency)


def settle(
    expenses: Sequence[Expense], settings: Settings | None = None
) -> list[MonthlyBalance]:
    """
    Compute the minimized monthly debts for a trip.

    Steps:
    1. Expand every expense into monthly charge events
    2. Split each charge event into participant shares
    3. Aggregate shares into net obligations per (month, currency)
    4. Net each bucket into debts and merge currencies per month

    A single malformed expense aborts the whole run.

    Args:
        expenses: All expenses of one trip, in any order
        settings: Settlement settings (defaults when omitted)

    Returns:
        One balance per month with a charge, sorted by month; debts sorted
        by (debtor_id, creditor_id, currency)

    Raises:
        ValidationError: If an expense is malformed
        ConfigurationError: If an expense uses an unsupported split type
    """
    settings = settings or Settings()
    validate_expense_set(expenses)

    events: list[ChargeEvent] = [
        event for expense in expenses for event in expand(expense, settings)
    ]
    shares = [share for event in events for share in split(event, settings)]
    obligations = aggregate(shares)

    debts_by_month: dict[str, list[MonthlyDebt]] = {
        event.period: [] for event in events
    }
    for (period, _currency), obligation in obligations.items():
        debts_by_month[period].extend(netting(obligation, settings))

    balances = [
        MonthlyBalance(month=month, debts=sorted(debts, key=_debt_sort_key))
        for month, debts in sorted(debts_by_month.items())
    ]

    logger.info(
        f"Settled {len(expenses)} expense(s) into {len(balances)} monthly "
        f"balance(s) with {sum(len(b.debts) for b in balances)} debt(s)"
    )
    return balances


def calculate_monthly_balance(
    expenses: Sequence[Expense], month: str, settings: Settings | None = None
) -> MonthlyBalance:
    """
    Compute the debts for a single month.

    Only expenses with an installment falling in ``month`` contribute, but
    every expense is still validated so a bad record fails the query.

    Args:
        expenses: All expenses of one trip
        month: Target month as YYYY-MM
        settings: Settlement settings (defaults when omitted)

    Returns:
        The month's balance, with no debts if nothing is due that month
    """
    if not re.match(MONTH_PATTERN, month):
        raise ValueError(f"Month must be formatted as YYYY-MM, got '{month}'")

    for balance in settle(expenses, settings):
        if balance.month == month:
            return balance
    return MonthlyBalance(month=month)


def _canonical_decimal(value: Decimal) -> str:
    return format(value.normalize(), "f")


def _canonical_expense(expense: Expense) -> str:
    """Render an expense so that equivalent records render identically."""
    data = expense.model_dump(by_alias=True)
    data["amount"] = _canonical_decimal(expense.amount)
    data["involvedUserIds"] = sorted(expense.involved_user_ids)
    data["splitType"] = expense.split_type or SPLIT_EQUAL
    if expense.split_ratios is not None:
        data["splitRatios"] = {
            user_id: _canonical_decimal(ratio)
            for user_id, ratio in expense.split_ratios.items()
        }
    return json.dumps(data, sort_keys=True, default=str)


def compute_expense_set_hash(trip_id: str, expenses: Sequence[Expense]) -> str:
    """
    Compute a content hash of a trip's expense set for cache keys.

    The hash ignores expense order, member order, ratio order and the
    scale of amounts, so the same set always maps to the same key and any
    edit produces a new one.

    Args:
        trip_id: The trip the expenses belong to
        expenses: The trip's expenses

    Returns:
        SHA256 hash as hex string
    """
    expense_data = sorted(_canonical_expense(expense) for expense in expenses)
    combined = "|".join([trip_id, *expense_data])
    return hashlib.sha256(combined.encode()).hexdigest()


class SettlementService:
    """Service for settling a trip's shared expenses."""

    def __init__(self, settings: Settings | None = None):
        """Initialize the settlement service."""
        self.settings = settings or Settings()

    def settle(self, expenses: Sequence[Expense]) -> list[MonthlyBalance]:
        """Compute minimized debts for every month of the trip."""
        return settle(expenses, self.settings)

    def monthly_balance(
        self, expenses: Sequence[Expense], month: str
    ) -> MonthlyBalance:
        """Compute minimized debts for one YYYY-MM month."""
        return calculate_monthly_balance(expenses, month, self.settings)

    def cache_key(self, trip_id: str, expenses: Sequence[Expense]) -> str:
        """Key under which a host may memoize this trip's settlement."""
        return f"{trip_id}:{compute_expense_set_hash(trip_id, expenses)}"
