"""Pydantic domain models for Trip Ledger."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SPLIT_EQUAL = "equal"
SPLIT_PERCENTAGE = "percentage"

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class LedgerModel(BaseModel):
    """Base model accepting both snake_case and the host's camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Trip Models
# ============================================================================


class Expense(LedgerModel):
    """One recorded outlay on a trip."""

    id: str
    trip_id: str
    description: str = ""
    amount: Decimal
    currency: str  # 'BRL', 'USD', 'EUR', etc.

    # 1 means one-time payment
    installments: int = 1
    start_date: date

    payer_id: str
    involved_user_ids: list[str]  # may or may not include the payer

    split_type: str | None = SPLIT_EQUAL
    split_ratios: dict[str, Decimal] | None = None  # userId -> percentage

    created_at: datetime | None = None
    created_by: str | None = None


# ============================================================================
# Derived Models
# ============================================================================


class ChargeEvent(LedgerModel):
    """One monthly occurrence of an expense after installment expansion."""

    expense_id: str
    period: str = Field(pattern=MONTH_PATTERN)
    amount_minor: int  # minor units of currency
    currency: str
    payer_id: str
    involved_user_ids: list[str]
    split_type: str | None = SPLIT_EQUAL
    split_ratios: dict[str, Decimal] | None = None


class ParticipantShare(LedgerModel):
    """What one non-payer participant owes the payer for a charge event."""

    expense_id: str
    period: str
    currency: str
    payer_id: str
    debtor_id: str
    amount_minor: int = Field(ge=0)


class NetObligation(LedgerModel):
    """Signed pairwise obligations for one (period, currency) bucket.

    Pairs are keyed by sorted participant ids ``(a, b)``; a positive value
    means ``a`` owes ``b``, a negative one that ``b`` owes ``a``.
    """

    period: str
    currency: str
    pairs: dict[tuple[str, str], int] = Field(default_factory=dict)

    def balances(self) -> dict[str, int]:
        """Net balance per participant (positive = is owed money)."""
        balances: dict[str, int] = {}
        for (first, second), owed in self.pairs.items():
            balances[first] = balances.get(first, 0) - owed
            balances[second] = balances.get(second, 0) + owed
        return balances


# ============================================================================
# Settlement Output
# ============================================================================


class MonthlyDebt(LedgerModel):
    """A single directed settle-up instruction."""

    debtor_id: str
    creditor_id: str
    amount: Decimal = Field(gt=0)
    currency: str


class MonthlyBalance(LedgerModel):
    """All minimized debts for one calendar month."""

    month: str = Field(pattern=MONTH_PATTERN)
    debts: list[MonthlyDebt] = Field(default_factory=list)
