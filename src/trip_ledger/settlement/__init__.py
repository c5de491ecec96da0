"""Settlement pipeline: installments, splits, ledger and debt netting."""

from .installments import add_months, expand, is_active_in, period_of
from .ledger import aggregate
from .netting import minimize_transfers, netting
from .service import (
    SettlementService,
    calculate_monthly_balance,
    compute_expense_set_hash,
    settle,
)
from .splitter import default_split_ratios, split

__all__ = [
    "add_months",
    "expand",
    "is_active_in",
    "period_of",
    "aggregate",
    "minimize_transfers",
    "netting",
    "SettlementService",
    "calculate_monthly_balance",
    "compute_expense_set_hash",
    "settle",
    "default_split_ratios",
    "split",
]
