"""Tests for the debt netting engine."""

from decimal import Decimal

from trip_ledger.config import Settings
from trip_ledger.models import NetObligation
from trip_ledger.settlement.netting import minimize_transfers, netting


def make_obligation(
    pairs: dict[tuple[str, str], int], currency: str = "USD"
) -> NetObligation:
    """Create a NetObligation for testing."""
    return NetObligation(period="2024-01", currency=currency, pairs=pairs)


def net_positions(debts) -> dict[str, Decimal]:
    """Per-participant position implied by a list of debts."""
    positions: dict[str, Decimal] = {}
    for debt in debts:
        positions[debt.debtor_id] = (
            positions.get(debt.debtor_id, Decimal(0)) - debt.amount
        )
        positions[debt.creditor_id] = (
            positions.get(debt.creditor_id, Decimal(0)) + debt.amount
        )
    return {user: amount for user, amount in positions.items() if amount != 0}


class TestMinimizeTransfers:
    """Test the greedy matching on raw balances."""

    def test_one_creditor_many_debtors(self):
        transfers = minimize_transfers({"a": -3000, "b": -2000, "c": 5000})

        assert transfers == [("a", "c", 3000), ("b", "c", 2000)]

    def test_largest_matched_first(self):
        transfers = minimize_transfers({"a": -500, "b": -2000, "c": 1500, "d": 1000})

        assert transfers == [("b", "c", 1500), ("a", "d", 500), ("b", "d", 500)]

    def test_ties_broken_by_id(self):
        transfers = minimize_transfers({"b": -1000, "a": -1000, "c": 2000})

        assert transfers == [("a", "c", 1000), ("b", "c", 1000)]

    def test_settled_participants_dropped(self):
        assert minimize_transfers({"a": 0, "b": 0}) == []

    def test_at_most_n_minus_one_transfers(self):
        balances = {"a": -700, "b": -300, "c": -1000, "d": 600, "e": 900, "f": 500}

        transfers = minimize_transfers(balances)

        assert len(transfers) <= len(balances) - 1
        assert all(amount > 0 for _, _, amount in transfers)

    def test_dust_dropped(self):
        assert minimize_transfers({"a": -1, "b": 1}, dust=1) == []

    def test_dust_remainder_dropped(self):
        transfers = minimize_transfers({"a": -1001, "b": 1000, "c": 1}, dust=1)

        assert transfers == [("a", "b", 1000)]


class TestNetting:
    """Test netting of a settlement bucket into debts."""

    def test_single_pair(self):
        debts = netting(make_obligation({("alice", "bob"): 1500}))

        assert len(debts) == 1
        assert debts[0].debtor_id == "alice"
        assert debts[0].creditor_id == "bob"
        assert debts[0].amount == Decimal("15.00")
        assert debts[0].currency == "USD"

    def test_negative_pair_reverses_direction(self):
        debts = netting(make_obligation({("alice", "bob"): -2500}))

        assert [(d.debtor_id, d.creditor_id, d.amount) for d in debts] == [
            ("bob", "alice", Decimal("25.00"))
        ]

    def test_chain_collapses(self):
        """a owes b, b owes c the same amount: a pays c directly."""
        debts = netting(make_obligation({("a", "b"): 1000, ("b", "c"): 1000}))

        assert [(d.debtor_id, d.creditor_id, d.amount) for d in debts] == [
            ("a", "c", Decimal("10.00"))
        ]

    def test_cycle_cancels(self):
        """a owes b, b owes c, c owes a: nobody owes anything."""
        debts = netting(
            make_obligation({("a", "b"): 1000, ("b", "c"): 1000, ("a", "c"): -1000})
        )

        assert debts == []

    def test_positions_preserved(self):
        obligation = make_obligation(
            {
                ("alice", "bob"): 1250,
                ("alice", "carol"): -400,
                ("bob", "dave"): 990,
                ("carol", "dave"): -75,
                ("alice", "dave"): 310,
            }
        )

        debts = netting(obligation)

        expected = {
            user: Decimal(balance).scaleb(-2)
            for user, balance in obligation.balances().items()
            if balance != 0
        }
        assert net_positions(debts) == expected

    def test_no_self_or_mutual_debts(self):
        debts = netting(
            make_obligation(
                {("a", "b"): 500, ("a", "c"): 700, ("b", "c"): -300, ("c", "d"): 900}
            )
        )

        pairs = {(d.debtor_id, d.creditor_id) for d in debts}
        assert all(debtor != creditor for debtor, creditor in pairs)
        assert all((creditor, debtor) not in pairs for debtor, creditor in pairs)
        debtors = {d.debtor_id for d in debts}
        creditors = {d.creditor_id for d in debts}
        assert debtors.isdisjoint(creditors)

    def test_sorted_by_debtor_then_creditor(self):
        debts = netting(
            make_obligation({("a", "z"): -500, ("b", "z"): -500, ("c", "z"): 2000})
        )

        keys = [(d.debtor_id, d.creditor_id) for d in debts]
        assert keys == sorted(keys)

    def test_zero_decimal_currency(self):
        debts = netting(make_obligation({("a", "b"): 1500}, currency="JPY"))

        assert str(debts[0].amount) == "1500"

    def test_dust_threshold_from_settings(self):
        settings = Settings(dust_threshold_minor_units=2)

        debts = netting(make_obligation({("a", "b"): 2, ("c", "d"): 300}), settings)

        assert [(d.debtor_id, d.creditor_id) for d in debts] == [("c", "d")]
