"""
Display utilities for balances and settlements
"""
from typing import Mapping, Optional

import schemas
from utils.currency import DEFAULT_CURRENCY, format_currency
from utils.settlements import SETTLED_TOLERANCE_CENTS


UNKNOWN_NAME = "Unknown"


def get_display_name(participant_id: str, names: Mapping[str, str]) -> str:
    """Look up a participant's display name, falling back to "Unknown"."""
    return names.get(participant_id) or UNKNOWN_NAME


def describe_balance(amount_cents: int, currency: str = DEFAULT_CURRENCY) -> str:
    """
    Describe a net balance from the participant's point of view.

    Example: 6000 -> "is owed $60.00", -3000 -> "owes $30.00", 1 -> "settled"
    """
    if abs(amount_cents) <= SETTLED_TOLERANCE_CENTS:
        return "settled"
    if amount_cents > 0:
        return f"is owed {format_currency(amount_cents, currency)}"
    return f"owes {format_currency(-amount_cents, currency)}"


def describe_participant_balance(
    name: str,
    amount_cents: int,
    currency: str = DEFAULT_CURRENCY
) -> str:
    """Example: "Alice is owed $60.00", "Bob is settled"."""
    description = describe_balance(amount_cents, currency)
    if description == "settled":
        return f"{name} is settled"
    return f"{name} {description}"


def describe_settlement(
    settlement: schemas.Settlement,
    names: Mapping[str, str],
    currency: str = DEFAULT_CURRENCY
) -> str:
    """Example: "Bob pays Alice $30.00"."""
    from_name = get_display_name(settlement.from_id, names)
    to_name = get_display_name(settlement.to_id, names)
    return f"{from_name} pays {to_name} {format_currency(settlement.amount, currency)}"


def build_balance_view(
    balances: Mapping[str, int],
    names: Mapping[str, str],
    currency: Optional[str] = None
) -> list[schemas.ParticipantBalance]:
    """Attach names and phrasing to every entry of a balance map."""
    currency = currency or DEFAULT_CURRENCY
    return [
        schemas.ParticipantBalance(
            participant_id=participant_id,
            name=get_display_name(participant_id, names),
            amount=amount,
            currency=currency,
            description=describe_balance(amount, currency)
        )
        for participant_id, amount in balances.items()
    ]


def build_settlement_view(
    settlements: list[schemas.Settlement],
    names: Mapping[str, str],
    currency: Optional[str] = None
) -> list[schemas.SettlementDetail]:
    """Attach names and "who pays whom" phrasing to a settlement plan."""
    currency = currency or DEFAULT_CURRENCY
    return [
        schemas.SettlementDetail(
            from_id=settlement.from_id,
            to_id=settlement.to_id,
            amount=settlement.amount,
            from_name=get_display_name(settlement.from_id, names),
            to_name=get_display_name(settlement.to_id, names),
            currency=currency,
            description=describe_settlement(settlement, names, currency)
        )
        for settlement in settlements
    ]
