from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint

from database import Base


def utcnow():
    return datetime.now(timezone.utc)


class Ride(Base):
    __tablename__ = "rides"

    id = Column(String, primary_key=True, index=True)
    name = Column(String)
    currency = Column(String, default="USD")
    created_at = Column(DateTime, default=utcnow)

class RideParticipant(Base):
    __tablename__ = "ride_participants"
    __table_args__ = (UniqueConstraint("ride_id", "participant_id"),)

    id = Column(Integer, primary_key=True, index=True)
    ride_id = Column(String, index=True)
    participant_id = Column(String)
    name = Column(String)

class Expense(Base):
    __tablename__ = "expenses"

    id = Column(String, primary_key=True, index=True)
    ride_id = Column(String, index=True)
    description = Column(String)
    amount = Column(Integer) # Stored in cents/smallest unit
    currency = Column(String, default="USD")
    category = Column(String, default="OTHER")
    payer_id = Column(String)
    split_type = Column(String, default="EQUAL") # EQUAL, UNEQUAL, PERCENTAGE, SHARES
    created_at = Column(DateTime, default=utcnow)

class ExpenseSplit(Base):
    __tablename__ = "expense_splits"

    id = Column(Integer, primary_key=True, index=True)
    expense_id = Column(String, index=True)
    participant_id = Column(String)
    position = Column(Integer) # Order within the expense's participant list
    amount_owed = Column(Integer) # The amount this participant owes, in cents
    weight = Column(String, nullable=True) # Cents, percentage or share weight depending on split_type
