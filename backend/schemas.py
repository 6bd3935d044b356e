from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from utils.currency import DEFAULT_CURRENCY


class ExpenseCategory(str, Enum):
    FUEL = "FUEL"
    TOLL = "TOLL"
    PARKING = "PARKING"
    FOOD = "FOOD"
    ACCOMMODATION = "ACCOMMODATION"
    SHOPPING = "SHOPPING"
    ENTERTAINMENT = "ENTERTAINMENT"
    OTHER = "OTHER"


class Participant(BaseModel):
    id: str
    name: str

    class Config:
        from_attributes = True


# Split policies. Each variant carries only the data its rule needs.
class EqualSplit(BaseModel):
    split_type: Literal["EQUAL"] = "EQUAL"


class UnequalSplit(BaseModel):
    split_type: Literal["UNEQUAL"] = "UNEQUAL"
    amounts: dict[str, int] = {}  # participant id -> cents

    @field_validator('amounts')
    @classmethod
    def validate_amounts(cls, v):
        for participant_id, amount in v.items():
            if amount < 0:
                raise ValueError(f'Amount for {participant_id} must not be negative')
        return v


class PercentageSplit(BaseModel):
    split_type: Literal["PERCENTAGE"] = "PERCENTAGE"
    percentages: dict[str, Decimal] = {}  # participant id -> percentage points

    @field_validator('percentages')
    @classmethod
    def validate_percentages(cls, v):
        for participant_id, percentage in v.items():
            if percentage < 0:
                raise ValueError(f'Percentage for {participant_id} must not be negative')
        return v


class SharesSplit(BaseModel):
    split_type: Literal["SHARES"] = "SHARES"
    shares: dict[str, Decimal] = {}  # participant id -> relative weight, defaults to 1

    @field_validator('shares')
    @classmethod
    def validate_shares(cls, v):
        for participant_id, weight in v.items():
            if weight <= 0:
                raise ValueError(f'Share weight for {participant_id} must be positive')
        return v


SplitPolicy = Annotated[
    Union[EqualSplit, UnequalSplit, PercentageSplit, SharesSplit],
    Field(discriminator="split_type")
]


class ExpenseBase(BaseModel):
    description: str = ""
    amount: int  # In cents
    currency: str = DEFAULT_CURRENCY
    category: ExpenseCategory = ExpenseCategory.OTHER
    payer_id: str
    participant_ids: list[str]
    split: SplitPolicy = Field(default_factory=EqualSplit)


class ExpenseCreate(ExpenseBase):
    pass


class Expense(ExpenseBase):
    id: str
    ride_id: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ExpenseSplitDetail(BaseModel):
    participant_id: str
    participant_name: str
    amount_owed: int


class ExpenseWithSplits(Expense):
    payer_name: str
    splits: list[ExpenseSplitDetail]


class SplitPreview(BaseModel):
    amount: int
    splits: list[ExpenseSplitDetail]


class RideBase(BaseModel):
    name: str
    currency: str = DEFAULT_CURRENCY


class RideCreate(RideBase):
    participants: list[Participant] = []


class Ride(RideBase):
    id: str
    created_at: datetime

    class Config:
        from_attributes = True


class RideWithParticipants(Ride):
    participants: list[Participant]


class Settlement(BaseModel):
    """One proposed payment from a debtor to a creditor."""
    from_id: str
    to_id: str
    amount: int  # In cents, always positive


class SettlementDetail(Settlement):
    from_name: str
    to_name: str
    currency: str
    description: str  # e.g. "Bob pays Alice $30.00"


class ParticipantBalance(BaseModel):
    """Balance representing what a participant owes or is owed."""
    participant_id: str
    name: str
    amount: int  # Positive means is owed, negative means owes
    currency: str
    description: str  # e.g. "is owed $60.00"


class ExpenseSummary(BaseModel):
    total_expenses: int
    per_person_share: int
    expense_count: int
    by_category: dict[str, int] = {}
    paid_by: dict[str, int] = {}
