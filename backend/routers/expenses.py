"""Expenses router: create, preview, read and delete ride expenses."""

import logging
import uuid
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

import models
import schemas
from database import get_db
from utils.display import get_display_name
from utils.locks import ride_locks
from utils.splits import compute_split
from utils.store import expense_from_row, get_ride_participants, load_ride_expenses, policy_weight
from utils.validation import get_expense_or_404, get_ride_or_404, validate_expense_participants


logger = logging.getLogger(__name__)

router = APIRouter(tags=["expenses"])


def split_or_400(expense: schemas.ExpenseBase) -> dict[str, int]:
    """Compute the split, turning a SplitError into a 400 that carries the mismatch."""
    result = compute_split(expense)
    if not result.ok:
        logger.info(f"Rejected expense: {result.error}")
        raise HTTPException(status_code=400, detail=result.error.to_detail())
    return result.split


def build_expense_detail(
    expense: schemas.Expense,
    owed: dict[str, int],
    names: dict[str, str]
) -> schemas.ExpenseWithSplits:
    return schemas.ExpenseWithSplits(
        **expense.model_dump(),
        payer_name=get_display_name(expense.payer_id, names),
        splits=[
            schemas.ExpenseSplitDetail(
                participant_id=participant_id,
                participant_name=get_display_name(participant_id, names),
                amount_owed=amount_owed
            )
            for participant_id, amount_owed in owed.items()
        ]
    )


@router.post("/rides/{ride_id}/expenses/preview", response_model=schemas.SplitPreview)
def preview_expense(ride_id: str, expense: schemas.ExpenseCreate, db: Session = Depends(get_db)):
    """Show each participant's share before the expense is saved."""
    get_ride_or_404(db, ride_id)
    names = {p.id: p.name for p in get_ride_participants(db, ride_id)}
    validate_expense_participants(set(names), expense.payer_id, expense.participant_ids)

    owed = split_or_400(expense)
    return schemas.SplitPreview(
        amount=expense.amount,
        splits=[
            schemas.ExpenseSplitDetail(
                participant_id=participant_id,
                participant_name=get_display_name(participant_id, names),
                amount_owed=amount_owed
            )
            for participant_id, amount_owed in owed.items()
        ]
    )


@router.post("/rides/{ride_id}/expenses", response_model=schemas.ExpenseWithSplits)
def create_expense(ride_id: str, expense: schemas.ExpenseCreate, db: Session = Depends(get_db)):
    get_ride_or_404(db, ride_id)

    # Appends for one ride are serialized so validation never races another write
    with ride_locks.hold(ride_id):
        names = {p.id: p.name for p in get_ride_participants(db, ride_id)}
        validate_expense_participants(set(names), expense.payer_id, expense.participant_ids)

        # An expense that can't be split is rejected, never adjusted
        owed = split_or_400(expense)

        db_expense = models.Expense(
            id=uuid.uuid4().hex,
            ride_id=ride_id,
            description=expense.description,
            amount=expense.amount,
            currency=expense.currency,
            category=expense.category.value,
            payer_id=expense.payer_id,
            split_type=expense.split.split_type
        )
        db.add(db_expense)

        for position, (participant_id, amount_owed) in enumerate(owed.items()):
            db.add(models.ExpenseSplit(
                expense_id=db_expense.id,
                participant_id=participant_id,
                position=position,
                amount_owed=amount_owed,
                weight=policy_weight(expense.split, participant_id, amount_owed)
            ))

        db.commit()
        db.refresh(db_expense)

    logger.info(f"Created expense {db_expense.id} ({db_expense.amount} cents) in ride {ride_id}")

    stored = schemas.Expense(
        **expense.model_dump(exclude={"participant_ids"}),
        participant_ids=list(owed),
        id=db_expense.id,
        ride_id=ride_id,
        created_at=db_expense.created_at
    )
    return build_expense_detail(stored, owed, names)


@router.get("/rides/{ride_id}/expenses", response_model=list[schemas.ExpenseWithSplits])
def get_ride_expenses(ride_id: str, db: Session = Depends(get_db)):
    get_ride_or_404(db, ride_id)
    names = {p.id: p.name for p in get_ride_participants(db, ride_id)}

    result = []
    for expense, splits in load_ride_expenses(db, ride_id):
        owed = {s.participant_id: s.amount_owed for s in sorted(splits, key=lambda s: s.position)}
        result.append(build_expense_detail(expense_from_row(expense, splits), owed, names))

    return result


@router.get("/expenses/{expense_id}", response_model=schemas.ExpenseWithSplits)
def get_expense(expense_id: str, db: Session = Depends(get_db)):
    expense = get_expense_or_404(db, expense_id)
    splits = db.query(models.ExpenseSplit).filter(
        models.ExpenseSplit.expense_id == expense_id
    ).order_by(models.ExpenseSplit.position).all()

    names = {p.id: p.name for p in get_ride_participants(db, expense.ride_id)}
    owed = {s.participant_id: s.amount_owed for s in splits}
    return build_expense_detail(expense_from_row(expense, splits), owed, names)


@router.delete("/expenses/{expense_id}")
def delete_expense(expense_id: str, db: Session = Depends(get_db)):
    expense = get_expense_or_404(db, expense_id)
    ride_id = expense.ride_id

    with ride_locks.hold(ride_id):
        # Delete associated splits
        db.query(models.ExpenseSplit).filter(models.ExpenseSplit.expense_id == expense_id).delete()

        # Delete the expense
        db.delete(expense)
        db.commit()

    logger.info(f"Deleted expense {expense_id} from ride {ride_id}")
    return {"message": "Expense deleted successfully"}
