"""Balance calculation utilities: fold a ride's expenses into net balances."""

import logging
from decimal import Decimal
from typing import Dict, Iterable, List

import schemas
from utils.currency import round_half_up
from utils.splits import compute_split


logger = logging.getLogger(__name__)


def compute_balances(
    participants: Iterable[str],
    expenses: Iterable[schemas.ExpenseBase]
) -> Dict[str, int]:
    """
    Calculate net balances (in cents) for every participant of a ride.

    Positive means the participant is owed money, negative means they owe.

    Each split entry moves its amount from the participant (debit) to the
    payer (credit), so a payer who is also in the split nets
    amount - own share. Shares of participants missing from `participants`
    are ignored on both sides, and expenses paid by an unknown participant
    are skipped entirely; either way the balances still sum to zero.

    Args:
        participants: Participant ids of the ride, in display order
        expenses: Expenses already validated at creation time

    Returns:
        Dictionary mapping participant id to net balance, keyed in the
        order of `participants`
    """
    # Initialize every known participant so settled people still show up
    net_balances = {participant_id: 0 for participant_id in participants}

    for expense in expenses:
        expense_id = getattr(expense, "id", None)

        if expense.payer_id not in net_balances:
            logger.warning(
                f"Skipping expense {expense_id}: payer {expense.payer_id} is not a ride participant"
            )
            continue

        result = compute_split(expense)
        if not result.ok:
            logger.warning(f"Skipping invalid expense {expense_id}: {result.error}")
            continue

        for participant_id, amount_owed in result.split.items():
            if participant_id not in net_balances:
                logger.warning(
                    f"Ignoring share of unknown participant {participant_id} "
                    f"in expense {expense_id}"
                )
                continue

            # Debtor decreases balance
            net_balances[participant_id] -= amount_owed

            # Creditor (payer) increases balance
            net_balances[expense.payer_id] += amount_owed

    return net_balances


def summarize_expenses(
    participants: List[str],
    expenses: List[schemas.ExpenseBase]
) -> schemas.ExpenseSummary:
    """Totals for the ride's expense summary card."""
    total_expenses = sum(expense.amount for expense in expenses)

    per_person_share = 0
    if participants:
        per_person_share = int(round_half_up(Decimal(total_expenses) / len(participants), Decimal("1")))

    by_category = {}
    paid_by = {}
    for expense in expenses:
        category = expense.category.value
        by_category[category] = by_category.get(category, 0) + expense.amount
        paid_by[expense.payer_id] = paid_by.get(expense.payer_id, 0) + expense.amount

    return schemas.ExpenseSummary(
        total_expenses=total_expenses,
        per_person_share=per_person_share,
        expense_count=len(expenses),
        by_category=by_category,
        paid_by=paid_by
    )
