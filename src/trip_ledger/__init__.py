"""Trip Ledger - Settle shared trip expenses into minimal monthly debts."""

__version__ = "0.1.0"

from .config import Settings, load_settings
from .exceptions import ConfigurationError, TripLedgerError, ValidationError
from .models import (
    ChargeEvent,
    Expense,
    MonthlyBalance,
    MonthlyDebt,
    NetObligation,
    ParticipantShare,
)
from .settlement import (
    SettlementService,
    calculate_monthly_balance,
    compute_expense_set_hash,
    settle,
)

__all__ = [
    "Settings",
    "load_settings",
    "ConfigurationError",
    "TripLedgerError",
    "ValidationError",
    "ChargeEvent",
    "Expense",
    "MonthlyBalance",
    "MonthlyDebt",
    "NetObligation",
    "ParticipantShare",
    "SettlementService",
    "calculate_monthly_balance",
    "compute_expense_set_hash",
    "settle",
]
