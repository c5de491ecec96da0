"""Installment expansion: one expense into its monthly charge events."""

import logging
from datetime import date, datetime

from dateutil.relativedelta import relativedelta

from ..config import Settings
from ..exceptions import ValidationError
from ..models import ChargeEvent, Expense
from .money import has_excess_precision, to_minor_units

logger = logging.getLogger(__name__)


def period_of(day: date) -> str:
    """Month bucket (YYYY-MM) containing the given date."""
    return f"{day.year:04d}-{day.month:02d}"


def _first_of(period: str) -> date:
    return datetime.strptime(period, "%Y-%m").date()


def add_months(period: str, months: int) -> str:
    """Advance a YYYY-MM period by a number of calendar months."""
    return period_of(_first_of(period) + relativedelta(months=months))


def months_between(start: str, end: str) -> int:
    """Signed number of calendar months from ``start`` to ``end``."""
    delta = relativedelta(_first_of(end), _first_of(start))
    return delta.years * 12 + delta.months


def is_active_in(expense: Expense, month: str) -> bool:
    """
    Check whether an expense has an occurrence in the given month.

    An expense starting in January with 3 installments is active in
    January, February and March.
    """
    offset = months_between(period_of(expense.start_date), month)
    return 0 <= offset < expense.installments


def expense_amount_minor(expense: Expense, settings: Settings | None = None) -> int:
    """
    Validate an expense's amount and return it in minor units.

    Raises:
        ValidationError: If the amount is not strictly positive
    """
    settings = settings or Settings()
    exponent = settings.exponent_for(expense.currency)

    if expense.amount <= 0:
        raise ValidationError(
            expense.id, "amount", f"must be > 0, got {expense.amount}"
        )

    if has_excess_precision(expense.amount, exponent):
        logger.warning(
            f"Expense {expense.id} has unusual precision for {expense.currency}: "
            f"{expense.amount}"
        )

    amount_minor = to_minor_units(expense.amount, exponent)
    if amount_minor <= 0:
        raise ValidationError(
            expense.id,
            "amount",
            f"{expense.amount} rounds to zero in {expense.currency}",
        )
    return amount_minor


def expand(expense: Expense, settings: Settings | None = None) -> list[ChargeEvent]:
    """
    Expand an expense into one charge event per installment.

    The amount is divided evenly in minor units; whatever cannot be divided
    goes to the first occurrence so the events always add up to the
    expense amount.

    Args:
        expense: The expense to expand
        settings: Settings providing currency minor units

    Returns:
        Exactly ``expense.installments`` charge events in month order

    Raises:
        ValidationError: If installments < 1 or amount <= 0
    """
    if expense.installments < 1:
        raise ValidationError(
            expense.id,
            "installments",
            f"must be >= 1, got {expense.installments}",
        )

    total_minor = expense_amount_minor(expense, settings)
    base, remainder = divmod(total_minor, expense.installments)
    first_day = expense.start_date.replace(day=1)
    first_period = period_of(first_day)

    events = [
        ChargeEvent(
            expense_id=expense.id,
            period=period_of(first_day + relativedelta(months=k)),
            amount_minor=base + (remainder if k == 0 else 0),
            currency=expense.currency,
            payer_id=expense.payer_id,
            involved_user_ids=expense.involved_user_ids,
            split_type=expense.split_type,
            split_ratios=expense.split_ratios,
        )
        for k in range(expense.installments)
    ]

    logger.debug(
        f"Expanded expense {expense.id} into {len(events)} charge(s) "
        f"starting {first_period}"
    )
    return events
