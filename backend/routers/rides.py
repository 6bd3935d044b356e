"""Rides router: register rides and their participants."""

import logging
import uuid
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

import models
import schemas
from database import get_db
from utils.store import get_ride_participants
from utils.validation import get_ride_or_404


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rides", tags=["rides"])


@router.post("", response_model=schemas.RideWithParticipants)
def create_ride(ride: schemas.RideCreate, db: Session = Depends(get_db)):
    participant_ids = [p.id for p in ride.participants]
    if len(participant_ids) != len(set(participant_ids)):
        raise HTTPException(status_code=400, detail="Participant ids must be unique")

    db_ride = models.Ride(
        id=uuid.uuid4().hex,
        name=ride.name,
        currency=ride.currency
    )
    db.add(db_ride)

    for participant in ride.participants:
        db.add(models.RideParticipant(
            ride_id=db_ride.id,
            participant_id=participant.id,
            name=participant.name
        ))

    db.commit()
    db.refresh(db_ride)
    logger.info(f"Created ride {db_ride.id} with {len(participant_ids)} participants")

    return schemas.RideWithParticipants(
        id=db_ride.id,
        name=db_ride.name,
        currency=db_ride.currency,
        created_at=db_ride.created_at,
        participants=ride.participants
    )


@router.get("/{ride_id}", response_model=schemas.RideWithParticipants)
def get_ride(ride_id: str, db: Session = Depends(get_db)):
    ride = get_ride_or_404(db, ride_id)
    return schemas.RideWithParticipants(
        id=ride.id,
        name=ride.name,
        currency=ride.currency,
        created_at=ride.created_at,
        participants=get_ride_participants(db, ride_id)
    )


@router.post("/{ride_id}/participants", response_model=schemas.Participant)
def add_participant(
    ride_id: str,
    participant: schemas.Participant,
    db: Session = Depends(get_db)
):
    get_ride_or_404(db, ride_id)

    existing = db.query(models.RideParticipant).filter(
        models.RideParticipant.ride_id == ride_id,
        models.RideParticipant.participant_id == participant.id
    ).first()
    if existing:
        raise HTTPException(status_code=409, detail="Participant already in this ride")

    db.add(models.RideParticipant(
        ride_id=ride_id,
        participant_id=participant.id,
        name=participant.name
    ))
    db.commit()
    logger.info(f"Added participant {participant.id} to ride {ride_id}")

    return participant
