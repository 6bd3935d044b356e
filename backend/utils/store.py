"""Expense store helpers: read rides, participants and expenses back as schemas."""

from decimal import Decimal

from sqlalchemy.orm import Session

import models
import schemas


def get_ride_participants(db: Session, ride_id: str) -> list[schemas.Participant]:
    """Participants of a ride, in the order they joined."""
    rows = db.query(models.RideParticipant).filter(
        models.RideParticipant.ride_id == ride_id
    ).order_by(models.RideParticipant.id).all()
    return [schemas.Participant(id=row.participant_id, name=row.name) for row in rows]


def split_policy_from_rows(split_type: str, splits: list[models.ExpenseSplit]) -> schemas.SplitPolicy:
    """Rebuild the split policy an expense was created with from its stored weights."""
    weighted = [s for s in splits if s.weight is not None]

    if split_type == "UNEQUAL":
        return schemas.UnequalSplit(amounts={s.participant_id: int(s.weight) for s in weighted})
    if split_type == "PERCENTAGE":
        return schemas.PercentageSplit(percentages={s.participant_id: Decimal(s.weight) for s in weighted})
    if split_type == "SHARES":
        return schemas.SharesSplit(shares={s.participant_id: Decimal(s.weight) for s in weighted})
    return schemas.EqualSplit()


def policy_weight(policy: schemas.SplitPolicy, participant_id: str, amount_owed: int):
    """The weight to store next to a split row, as a string (None for EQUAL)."""
    if isinstance(policy, schemas.UnequalSplit):
        return str(amount_owed)
    if isinstance(policy, schemas.PercentageSplit):
        return str(policy.percentages.get(participant_id, Decimal(0)))
    if isinstance(policy, schemas.SharesSplit):
        return str(policy.shares.get(participant_id, Decimal(1)))
    return None


def expense_from_row(expense: models.Expense, splits: list[models.ExpenseSplit]) -> schemas.Expense:
    splits = sorted(splits, key=lambda s: s.position)
    return schemas.Expense(
        id=expense.id,
        ride_id=expense.ride_id,
        description=expense.description or "",
        amount=expense.amount,
        currency=expense.currency,
        category=expense.category,
        payer_id=expense.payer_id,
        participant_ids=[s.participant_id for s in splits],
        split=split_policy_from_rows(expense.split_type, splits),
        created_at=expense.created_at
    )


def load_ride_expenses(db: Session, ride_id: str) -> list[tuple[models.Expense, list[models.ExpenseSplit]]]:
    """
    Fetch every expense of a ride with its split rows, newest first.

    Uses two queries (expenses, then all their splits) instead of one
    query per expense.
    """
    expenses = db.query(models.Expense).filter(
        models.Expense.ride_id == ride_id
    ).order_by(models.Expense.created_at.desc(), models.Expense.id.desc()).all()

    if not expenses:
        return []

    expense_ids = [e.id for e in expenses]
    all_splits = db.query(models.ExpenseSplit).filter(
        models.ExpenseSplit.expense_id.in_(expense_ids)
    ).all()

    # Group splits by expense_id
    splits_by_expense = {}
    for split in all_splits:
        splits_by_expense.setdefault(split.expense_id, []).append(split)

    return [(expense, splits_by_expense.get(expense.id, [])) for expense in expenses]
