"""Split calculation utilities: turn one expense into per-participant owed cents."""

from dataclasses import dataclass
from decimal import Decimal, ROUND_FLOOR
from typing import Optional

import schemas


# Unequal splits may be off by a single cent, matching what the form allows
AMOUNT_TOLERANCE_CENTS = 1
PERCENTAGE_TOLERANCE = Decimal("0.01")
DEFAULT_SHARE_WEIGHT = Decimal("1")


class SplitError(ValueError):
    """An expense whose split can't be computed. The expense must be rejected."""

    code = "SPLIT_ERROR"

    def to_detail(self) -> dict:
        return {"code": self.code, "message": str(self)}


class EmptyParticipants(SplitError):
    code = "EMPTY_PARTICIPANTS"

    def __init__(self):
        super().__init__("At least one participant must be included in the split")


class InvalidAmount(SplitError):
    code = "INVALID_AMOUNT"

    def __init__(self, amount: int):
        self.amount = amount
        super().__init__(f"Expense amount must be positive, got {amount}")

    def to_detail(self) -> dict:
        return {**super().to_detail(), "amount": self.amount}


class AmountMismatch(SplitError):
    code = "AMOUNT_MISMATCH"

    def __init__(self, actual: int, expected: int):
        self.actual = actual
        self.expected = expected
        super().__init__(
            f"Split amounts do not sum to total expense amount. Total: {expected}, Sum: {actual}"
        )

    def to_detail(self) -> dict:
        return {**super().to_detail(), "actual": self.actual, "expected": self.expected}


class PercentageMismatch(SplitError):
    code = "PERCENTAGE_MISMATCH"

    def __init__(self, actual: Decimal):
        self.actual = actual
        super().__init__(f"Percentages must total 100%, got {actual}%")

    def to_detail(self) -> dict:
        # Decimal isn't JSON serializable; keep the exact digits as a string
        return {**super().to_detail(), "actual": str(self.actual), "expected": "100"}


@dataclass(frozen=True)
class SplitResult:
    """Outcome of compute_split: exactly one of split or error is set."""
    split: Optional[dict[str, int]] = None
    error: Optional[SplitError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> dict[str, int]:
        if self.error is not None:
            raise self.error
        return self.split


def _unique(participant_ids: list[str]) -> list[str]:
    return list(dict.fromkeys(participant_ids))


def _distribute_remainder(owed: dict[str, int], remainder: int, eligible=None) -> dict[str, int]:
    """Give one cent each to the first `remainder` eligible participants in id order."""
    for participant_id in sorted(owed if eligible is None else eligible)[:remainder]:
        owed[participant_id] += 1
    return owed


def _split_by_weights(amount: int, weights: dict[str, Decimal]) -> dict[str, int]:
    """
    Split `amount` proportionally to `weights`, exactly, in cents.

    Each exact share is floored to a whole cent; the cents lost to flooring
    (always fewer than the number of participants) are handed out one at a
    time in participant id order, skipping zero weights.
    """
    total_weight = sum(weights.values(), Decimal(0))
    owed = {}
    for participant_id, weight in weights.items():
        exact = Decimal(amount) * weight / total_weight
        owed[participant_id] = int(exact.to_integral_value(rounding=ROUND_FLOOR))

    remainder = amount - sum(owed.values())
    eligible = [participant_id for participant_id, weight in weights.items() if weight > 0]
    return _distribute_remainder(owed, remainder, eligible)


def calculate_split(expense: schemas.ExpenseBase) -> dict[str, int]:
    """
    Calculate each participant's owed amount (in cents) for one expense.

    Policies:
    - EQUAL: amount // n each, remainder cents to the first participants by id
    - UNEQUAL: explicit cents per participant, must sum to the amount (±1 cent)
    - PERCENTAGE: percentages must sum to 100 (±0.01), then split like SHARES
    - SHARES: weight / total weight of the amount, missing weights count as 1

    Returns:
        Mapping of participant id to owed cents, in participant_ids order

    Raises:
        SplitError: If the expense can't be split as given
    """
    if expense.amount <= 0:
        raise InvalidAmount(expense.amount)

    participant_ids = _unique(expense.participant_ids)
    if not participant_ids:
        raise EmptyParticipants()

    policy = expense.split

    if isinstance(policy, schemas.UnequalSplit):
        owed = {pid: policy.amounts.get(pid, 0) for pid in participant_ids}
        total = sum(owed.values())
        if abs(total - expense.amount) > AMOUNT_TOLERANCE_CENTS:
            raise AmountMismatch(actual=total, expected=expense.amount)
        return owed

    if isinstance(policy, schemas.PercentageSplit):
        percentages = {pid: policy.percentages.get(pid, Decimal(0)) for pid in participant_ids}
        total = sum(percentages.values(), Decimal(0))
        if abs(total - 100) > PERCENTAGE_TOLERANCE:
            raise PercentageMismatch(actual=total)
        # Scale by the actual total so a sum within tolerance of 100 still covers the amount
        return _split_by_weights(expense.amount, percentages)

    if isinstance(policy, schemas.SharesSplit):
        weights = {pid: policy.shares.get(pid, DEFAULT_SHARE_WEIGHT) for pid in participant_ids}
        return _split_by_weights(expense.amount, weights)

    # EQUAL
    share_per_person = expense.amount // len(participant_ids)
    remainder = expense.amount % len(participant_ids)
    owed = {pid: share_per_person for pid in participant_ids}
    return _distribute_remainder(owed, remainder)


def compute_split(expense: schemas.ExpenseBase) -> SplitResult:
    """Non-raising variant of calculate_split; failures come back as SplitResult.error."""
    try:
        return SplitResult(split=calculate_split(expense))
    except SplitError as e:
        return SplitResult(error=e)
