"""Split calculation: who owes the payer what for one charge event."""

import logging
from decimal import ROUND_DOWN, Decimal

from ..config import Settings
from ..exceptions import ConfigurationError, ValidationError
from ..models import SPLIT_EQUAL, SPLIT_PERCENTAGE, ChargeEvent, ParticipantShare

logger = logging.getLogger(__name__)

HUNDRED = Decimal(100)


def default_split_ratios(user_ids: list[str]) -> dict[str, int]:
    """
    Seed whole-number percentages for a percentage split.

    Every member gets ``100 // n`` and the first member also takes the
    remainder, e.g. three members become 34/33/33.
    """
    if not user_ids:
        return {}
    equal_share, remainder = divmod(100, len(user_ids))
    return {
        user_id: equal_share + (remainder if i == 0 else 0)
        for i, user_id in enumerate(user_ids)
    }


def validate_members(event: ChargeEvent) -> None:
    """Check that the involved participants form a non-empty set."""
    if not event.involved_user_ids:
        raise ValidationError(event.expense_id, "involvedUserIds", "must not be empty")

    if len(set(event.involved_user_ids)) != len(event.involved_user_ids):
        raise ValidationError(
            event.expense_id, "involvedUserIds", "contains duplicate participants"
        )


def validate_ratios(
    event: ChargeEvent, tolerance: Decimal
) -> tuple[dict[str, Decimal], Decimal]:
    """
    Check percentage ratios against the involved participants.

    Returns:
        The ratios as Decimals keyed by participant, and their total

    Raises:
        ValidationError: If ratios are missing, cover the wrong members,
                         are negative, or do not sum to 100
    """
    ratios = event.split_ratios
    if not ratios:
        raise ValidationError(
            event.expense_id, "splitRatios", "required for a percentage split"
        )

    members = set(event.involved_user_ids)
    missing = sorted(members - ratios.keys())
    if missing:
        raise ValidationError(
            event.expense_id, "splitRatios", f"missing ratio for {', '.join(missing)}"
        )

    extra = sorted(ratios.keys() - members)
    if extra:
        raise ValidationError(
            event.expense_id,
            "splitRatios",
            f"ratio given for non-participant {', '.join(extra)}",
        )

    negative = sorted(user_id for user_id, ratio in ratios.items() if ratio < 0)
    if negative:
        raise ValidationError(
            event.expense_id, "splitRatios", f"negative ratio for {', '.join(negative)}"
        )

    total = sum(ratios.values(), Decimal(0))
    if abs(total - HUNDRED) > tolerance:
        raise ValidationError(
            event.expense_id, "splitRatios", f"ratios sum to {total}, expected 100"
        )

    return {user_id: Decimal(ratio) for user_id, ratio in ratios.items()}, total


def _equal_portions(event: ChargeEvent) -> dict[str, int]:
    base = event.amount_minor // len(event.involved_user_ids)
    return {user_id: base for user_id in event.involved_user_ids}


def _percentage_portions(event: ChargeEvent, tolerance: Decimal) -> dict[str, int]:
    ratios, total = validate_ratios(event, tolerance)
    if total <= 0:
        raise ValidationError(event.expense_id, "splitRatios", "ratios sum to zero")

    # Scaled by the actual total so portions never exceed the amount
    return {
        user_id: int(
            (event.amount_minor * ratios[user_id] / total).to_integral_value(
                rounding=ROUND_DOWN
            )
        )
        for user_id in event.involved_user_ids
    }


def split(
    event: ChargeEvent, settings: Settings | None = None
) -> list[ParticipantShare]:
    """
    Compute what each non-payer participant owes for a charge event.

    Steps:
    1. Compute every member's portion, rounded down to the minor unit
    2. Compute residual = event amount - sum of portions
    3. Give the residual to the lexicographically first non-payer debtor
    4. Emit one share per non-payer member; the payer's own portion is absorbed

    If the payer is the only member, no share is emitted and the payer
    absorbs the whole amount.

    Args:
        event: The charge event to split
        settings: Settings providing the percentage tolerance

    Returns:
        Participant shares sorted by debtor id

    Raises:
        ValidationError: If members or percentage ratios are malformed
        ConfigurationError: If the split type is not supported
    """
    settings = settings or Settings()
    validate_members(event)

    split_type = event.split_type or SPLIT_EQUAL
    if split_type == SPLIT_EQUAL:
        portions = _equal_portions(event)
    elif split_type == SPLIT_PERCENTAGE:
        portions = _percentage_portions(event, settings.percentage_tolerance)
    else:
        raise ConfigurationError(
            f"Expense {event.expense_id}: unsupported split type '{split_type}'"
        )

    debtors = sorted(user_id for user_id in portions if user_id != event.payer_id)
    if not debtors:
        return []

    residual = event.amount_minor - sum(portions.values())
    if residual:
        portions[debtors[0]] += residual
        logger.debug(
            f"Assigned rounding residual of {residual} minor unit(s) "
            f"to {debtors[0]} on expense {event.expense_id} ({event.period})"
        )

    return [
        ParticipantShare(
            expense_id=event.expense_id,
            period=event.period,
            currency=event.currency,
            payer_id=event.payer_id,
            debtor_id=debtor_id,
            amount_minor=portions[debtor_id],
        )
        for debtor_id in debtors
    ]
