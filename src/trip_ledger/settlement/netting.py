"""Debt netting: reduce pairwise obligations to a short list of transfers."""

import heapq
import logging

from ..config import Settings
from ..models import MonthlyDebt, NetObligation
from .money import from_minor_units

logger = logging.getLogger(__name__)


def split_balances(
    balances: dict[str, int], dust: int = 0
) -> tuple[list[tuple[int, str]], list[tuple[int, str]]]:
    """
    Partition net balances into debtor and creditor heaps.

    Participants whose balance is within ``dust`` of zero are settled and
    dropped. Heap entries are ``(-magnitude, participant_id)`` so the
    largest magnitude pops first and equal magnitudes pop by id ascending.

    Returns:
        Tuple of (debtors, creditors) heaps
    """
    debtors = [
        (balance, user_id) for user_id, balance in balances.items() if balance < -dust
    ]
    creditors = [
        (-balance, user_id) for user_id, balance in balances.items() if balance > dust
    ]
    heapq.heapify(debtors)
    heapq.heapify(creditors)
    return debtors, creditors


def minimize_transfers(
    balances: dict[str, int], dust: int = 0
) -> list[tuple[str, str, int]]:
    """
    Greedily settle net balances, largest debtor against largest creditor.

    Each round pays ``min(debt, credit)`` and exhausts at least one side,
    so ``n`` participants with a nonzero balance need at most ``n - 1``
    transfers. This is a heuristic; it does not always find the minimum.

    Args:
        balances: Net balance per participant in minor units
                  (positive = is owed money)
        dust: Remainders at or below this many minor units are dropped

    Returns:
        List of (debtor_id, creditor_id, amount_minor) transfers
    """
    debtors, creditors = split_balances(balances, dust)
    transfers = []

    while debtors and creditors:
        neg_debt, debtor_id = heapq.heappop(debtors)
        neg_credit, creditor_id = heapq.heappop(creditors)
        debt, credit = -neg_debt, -neg_credit

        amount = min(debt, credit)
        transfers.append((debtor_id, creditor_id, amount))

        if debt - amount > dust:
            heapq.heappush(debtors, (amount - debt, debtor_id))
        if credit - amount > dust:
            heapq.heappush(creditors, (amount - credit, creditor_id))

    if debtors or creditors:
        logger.debug(
            f"Dropped {len(debtors) + len(creditors)} unmatched balance(s) as dust"
        )

    return transfers


def netting(
    obligation: NetObligation, settings: Settings | None = None
) -> list[MonthlyDebt]:
    """
    Produce the settle-up debts for one (period, currency) bucket.

    The debts reproduce every participant's net position from the raw
    pairwise obligations, and nobody is both a debtor and a creditor.

    Args:
        obligation: Net pairwise obligations for the bucket
        settings: Settings providing the dust threshold and minor units

    Returns:
        Debts sorted by (debtor_id, creditor_id)
    """
    settings = settings or Settings()
    exponent = settings.exponent_for(obligation.currency)

    transfers = minimize_transfers(
        obligation.balances(), dust=settings.dust_threshold_minor_units
    )

    debts = [
        MonthlyDebt(
            debtor_id=debtor_id,
            creditor_id=creditor_id,
            amount=from_minor_units(amount, exponent),
            currency=obligation.currency,
        )
        for debtor_id, creditor_id, amount in sorted(transfers)
    ]

    logger.debug(
        f"Netted {len(obligation.pairs)} pair(s) into {len(debts)} debt(s) "
        f"for {obligation.period} {obligation.currency}"
    )
    return debts
