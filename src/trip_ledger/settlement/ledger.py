"""Ledger aggregation: fold participant shares into net pairwise obligations."""

import logging
from collections.abc import Iterable

from ..models import NetObligation, ParticipantShare

logger = logging.getLogger(__name__)

BucketKey = tuple[str, str]  # (period, currency)


def pair_key(debtor_id: str, creditor_id: str) -> tuple[tuple[str, str], int]:
    """
    Order a debtor/creditor pair into its unordered key.

    Returns:
        Tuple of (sorted pair, sign) where sign is +1 when the debtor is the
        first id of the pair and -1 otherwise
    """
    if debtor_id < creditor_id:
        return (debtor_id, creditor_id), 1
    return (creditor_id, debtor_id), -1


def aggregate(shares: Iterable[ParticipantShare]) -> dict[BucketKey, NetObligation]:
    """
    Group shares by (period, currency) and net them per participant pair.

    Each share means "debtor owes payer"; shares in the opposite direction
    for the same pair cancel out. Addition is the only operation, so the
    result does not depend on input order.

    Args:
        shares: Participant shares from any number of expenses

    Returns:
        Net obligations keyed by (period, currency)
    """
    buckets: dict[BucketKey, dict[tuple[str, str], int]] = {}

    for share in shares:
        if share.debtor_id == share.payer_id:
            continue
        pairs = buckets.setdefault((share.period, share.currency), {})
        key, sign = pair_key(share.debtor_id, share.payer_id)
        pairs[key] = pairs.get(key, 0) + sign * share.amount_minor

    obligations = {
        (period, currency): NetObligation(period=period, currency=currency, pairs=pairs)
        for (period, currency), pairs in buckets.items()
    }

    logger.debug(f"Aggregated shares into {len(obligations)} settlement bucket(s)")
    return obligations
