"""Debt simplification: turn net balances into a short list of payments."""

import logging
from typing import Dict, List

import schemas


logger = logging.getLogger(__name__)

# Balances within a cent of zero are treated as settled
SETTLED_TOLERANCE_CENTS = 1


def plan_settlements(balances: Dict[str, int]) -> List[schemas.Settlement]:
    """
    Simplify debts with a greedy largest-debtor / largest-creditor match.

    Algorithm:
    1. Split participants into creditors (> 1 cent) and debtors (< -1 cent)
    2. Sort both largest first; ties keep the balance map's order
    3. Pay min(debt, credit) from the current debtor to the current creditor
    4. Move past whoever is within a cent of settled, until one side runs out

    This emits at most (non-zero participants - 1) payments but is not
    guaranteed to be the global minimum, which is NP-hard in general.

    Args:
        balances: Mapping of participant id to net balance in cents

    Returns:
        List of settlements, from debtor to creditor
    """
    debtors = []
    creditors = []

    for participant_id, amount in balances.items():
        if amount < -SETTLED_TOLERANCE_CENTS:
            debtors.append({'id': participant_id, 'amount': -amount})
        elif amount > SETTLED_TOLERANCE_CENTS:
            creditors.append({'id': participant_id, 'amount': amount})

    # sort() is stable, so equal amounts stay in balance map order
    debtors.sort(key=lambda x: x['amount'], reverse=True)
    creditors.sort(key=lambda x: x['amount'], reverse=True)

    transactions = []
    i = 0
    j = 0

    while i < len(debtors) and j < len(creditors):
        debtor = debtors[i]
        creditor = creditors[j]

        amount = min(debtor['amount'], creditor['amount'])

        transactions.append(schemas.Settlement(
            from_id=debtor['id'],
            to_id=creditor['id'],
            amount=amount
        ))

        debtor['amount'] -= amount
        creditor['amount'] -= amount

        if debtor['amount'] <= SETTLED_TOLERANCE_CENTS:
            i += 1
        if creditor['amount'] <= SETTLED_TOLERANCE_CENTS:
            j += 1

    logger.debug(f"Planned {len(transactions)} settlements for {len(balances)} participants")
    return transactions


def apply_settlements(
    balances: Dict[str, int],
    settlements: List[schemas.Settlement]
) -> Dict[str, int]:
    """Return the balances left after every settlement is paid."""
    remaining = dict(balances)
    for settlement in settlements:
        # Paying a debt raises the payer's balance and lowers the receiver's
        remaining[settlement.from_id] = remaining.get(settlement.from_id, 0) + settlement.amount
        remaining[settlement.to_id] = remaining.get(settlement.to_id, 0) - settlement.amount
    return remaining
