"""Validation utilities for rides, expenses and expense participants."""

from sqlalchemy.orm import Session
from fastapi import HTTPException

import models


def get_ride_or_404(db: Session, ride_id: str):
    """Get a ride by ID or raise 404 if not found."""
    ride = db.query(models.Ride).filter(models.Ride.id == ride_id).first()
    if not ride:
        raise HTTPException(status_code=404, detail="Ride not found")
    return ride


def get_expense_or_404(db: Session, expense_id: str):
    """Get an expense by ID or raise 404 if not found."""
    expense = db.query(models.Expense).filter(models.Expense.id == expense_id).first()
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return expense


def validate_expense_participants(
    ride_participant_ids: set[str],
    payer_id: str,
    participant_ids: list[str]
) -> None:
    """Validate that the payer and every split participant belong to the ride."""
    if payer_id not in ride_participant_ids:
        raise HTTPException(status_code=400, detail=f"Payer {payer_id} is not a participant of this ride")

    for participant_id in participant_ids:
        if participant_id not in ride_participant_ids:
            raise HTTPException(
                status_code=400,
                detail=f"Participant {participant_id} in splits is not a participant of this ride"
            )
