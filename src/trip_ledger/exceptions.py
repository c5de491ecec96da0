"""Custom exceptions for Trip Ledger."""


class TripLedgerError(Exception):
    """Base exception for all Trip Ledger errors."""

    pass


class ConfigurationError(TripLedgerError):
    """Raised when configuration is invalid or a split type is unsupported."""

    pass


class ValidationError(TripLedgerError):
    """Raised when an expense record breaks a settlement invariant.

    Carries the offending expense id and field so the host can point the
    user at the record that needs fixing.
    """

    def __init__(self, expense_id: str, field: str, message: str):
        self.expense_id = expense_id
        self.field = field
        super().__init__(f"Expense {expense_id}: invalid {field}: {message}")
