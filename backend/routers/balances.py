"""Balances router: balance calculations and debt simplification."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import schemas
from database import get_db
from utils.balances import compute_balances, summarize_expenses
from utils.display import build_balance_view, build_settlement_view
from utils.locks import ride_locks
from utils.settlements import plan_settlements
from utils.store import expense_from_row, get_ride_participants, load_ride_expenses
from utils.validation import get_ride_or_404


router = APIRouter(prefix="/rides", tags=["balances"])


def load_ride_snapshot(db: Session, ride_id: str):
    """Participants and expenses of a ride, read while no write is in flight."""
    with ride_locks.hold(ride_id):
        participants = get_ride_participants(db, ride_id)
        expenses = [expense_from_row(expense, splits) for expense, splits in load_ride_expenses(db, ride_id)]
    return participants, expenses


@router.get("/{ride_id}/balances", response_model=list[schemas.ParticipantBalance])
def get_ride_balances(ride_id: str, db: Session = Depends(get_db)):
    ride = get_ride_or_404(db, ride_id)
    participants, expenses = load_ride_snapshot(db, ride_id)

    net_balances = compute_balances([p.id for p in participants], expenses)
    names = {p.id: p.name for p in participants}
    return build_balance_view(net_balances, names, ride.currency)


@router.get("/{ride_id}/settlements")
def get_ride_settlements(ride_id: str, db: Session = Depends(get_db)):
    """Simplify debts in a ride. Returns the payments that settle every balance."""
    ride = get_ride_or_404(db, ride_id)
    participants, expenses = load_ride_snapshot(db, ride_id)

    net_balances = compute_balances([p.id for p in participants], expenses)
    transactions = plan_settlements(net_balances)

    names = {p.id: p.name for p in participants}
    return {"transactions": build_settlement_view(transactions, names, ride.currency)}


@router.get("/{ride_id}/summary", response_model=schemas.ExpenseSummary)
def get_ride_summary(ride_id: str, db: Session = Depends(get_db)):
    get_ride_or_404(db, ride_id)
    participants, expenses = load_ride_snapshot(db, ride_id)
    return summarize_expenses([p.id for p in participants], expenses)
