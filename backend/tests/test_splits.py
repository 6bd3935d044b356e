from decimal import Decimal

import pytest

import schemas
from utils.splits import (
    AmountMismatch,
    EmptyParticipants,
    InvalidAmount,
    PercentageMismatch,
    SplitError,
    calculate_split,
    compute_split,
)


def make_expense(amount, participant_ids, split=None, payer_id="A"):
    return schemas.ExpenseCreate(
        description="Fuel",
        amount=amount,
        payer_id=payer_id,
        participant_ids=participant_ids,
        split=split or schemas.EqualSplit()
    )


def test_equal_split():
    result = compute_split(make_expense(9000, ["A", "B", "C"]))
    assert result.ok
    assert result.split == {"A": 3000, "B": 3000, "C": 3000}


def test_equal_split_remainder_goes_to_first_ids():
    # $100.00 / 3: one leftover cent, given to the lowest id
    split = calculate_split(make_expense(10000, ["C", "A", "B"]))
    assert split == {"C": 3333, "A": 3334, "B": 3333}
    assert list(split) == ["C", "A", "B"]
    assert sum(split.values()) == 10000


def test_equal_split_ignores_duplicate_participants():
    split = calculate_split(make_expense(2000, ["A", "B", "A"]))
    assert split == {"A": 1000, "B": 1000}


def test_unequal_split():
    policy = schemas.UnequalSplit(amounts={"A": 2000, "B": 1000})
    split = calculate_split(make_expense(3000, ["A", "B"], policy))
    assert split == {"A": 2000, "B": 1000}


def test_unequal_split_missing_amount_defaults_to_zero():
    policy = schemas.UnequalSplit(amounts={"A": 3000})
    split = calculate_split(make_expense(3000, ["A", "B"], policy))
    assert split == {"A": 3000, "B": 0}


def test_unequal_split_within_one_cent_is_accepted_as_given():
    policy = schemas.UnequalSplit(amounts={"A": 1500, "B": 1499})
    split = calculate_split(make_expense(3000, ["A", "B"], policy))
    assert split == {"A": 1500, "B": 1499}


def test_unequal_split_mismatch():
    policy = schemas.UnequalSplit(amounts={"A": 2000, "B": 500})
    result = compute_split(make_expense(3000, ["A", "B"], policy))

    assert not result.ok
    assert isinstance(result.error, AmountMismatch)
    assert result.error.actual == 2500
    assert result.error.expected == 3000
    assert result.error.to_detail() == {
        "code": "AMOUNT_MISMATCH",
        "message": str(result.error),
        "actual": 2500,
        "expected": 3000
    }


def test_unequal_split_only_counts_selected_participants():
    policy = schemas.UnequalSplit(amounts={"A": 2000, "B": 1000, "C": 5000})
    split = calculate_split(make_expense(3000, ["A", "B"], policy))
    assert split == {"A": 2000, "B": 1000}


def test_percentage_split():
    policy = schemas.PercentageSplit(percentages={"A": Decimal("50"), "B": Decimal("30"), "C": Decimal("20")})
    split = calculate_split(make_expense(10000, ["A", "B", "C"], policy))
    assert split == {"A": 5000, "B": 3000, "C": 2000}


def test_percentage_split_uneven_thirds_sum_exactly():
    policy = schemas.PercentageSplit(
        percentages={"A": Decimal("33.33"), "B": Decimal("33.33"), "C": Decimal("33.34")}
    )
    split = calculate_split(make_expense(1000, ["A", "B", "C"], policy))
    assert sum(split.values()) == 1000
    assert split == {"A": 334, "B": 333, "C": 333}


def test_percentage_mismatch():
    policy = schemas.PercentageSplit(percentages={"A": Decimal("50"), "B": Decimal("40")})
    result = compute_split(make_expense(10000, ["A", "B"], policy))

    assert not result.ok
    assert isinstance(result.error, PercentageMismatch)
    assert result.error.actual == 90
    assert result.error.to_detail()["actual"] == "90"


def test_shares_split_default_weight():
    policy = schemas.SharesSplit(shares={"A": Decimal("3")})
    split = calculate_split(make_expense(4000, ["A", "B"], policy))
    assert split == {"A": 3000, "B": 1000}


def test_shares_split_fractional_weights():
    policy = schemas.SharesSplit(shares={"A": Decimal("1.5"), "B": Decimal("0.5")})
    split = calculate_split(make_expense(1001, ["A", "B"], policy))
    assert split == {"A": 751, "B": 250}


def test_shares_must_be_positive():
    with pytest.raises(ValueError):
        schemas.SharesSplit(shares={"A": Decimal("0")})


def test_empty_participants():
    result = compute_split(make_expense(1000, []))
    assert isinstance(result.error, EmptyParticipants)
    assert result.error.code == "EMPTY_PARTICIPANTS"


@pytest.mark.parametrize("amount", [0, -500])
def test_invalid_amount(amount):
    result = compute_split(make_expense(amount, ["A"]))
    assert isinstance(result.error, InvalidAmount)
    assert result.error.to_detail()["amount"] == amount


def test_calculate_split_raises_split_error():
    with pytest.raises(SplitError):
        calculate_split(make_expense(1000, []))


def test_unwrap_raises_stored_error():
    result = compute_split(make_expense(0, ["A"]))
    with pytest.raises(InvalidAmount):
        result.unwrap()


@pytest.mark.parametrize("split", [
    schemas.EqualSplit(),
    schemas.PercentageSplit(percentages={"A": Decimal("12.5"), "B": Decimal("80"), "C": Decimal("7.5")}),
    schemas.SharesSplit(shares={"A": Decimal("2"), "C": Decimal("7")}),
])
@pytest.mark.parametrize("amount", [1, 97, 10000, 123457])
def test_split_sums_to_amount(split, amount):
    owed = calculate_split(make_expense(amount, ["A", "B", "C"], split))
    assert sum(owed.values()) == amount
    assert all(value >= 0 for value in owed.values())


@pytest.mark.parametrize("percentages", [
    {"A": Decimal("50"), "B": Decimal("50.01")},
    {"A": Decimal("50"), "B": Decimal("49.99")},
])
def test_percentage_split_within_tolerance_sums_to_amount(percentages):
    policy = schemas.PercentageSplit(percentages=percentages)
    owed = calculate_split(make_expense(1000000, ["A", "B"], policy))
    assert sum(owed.values()) == 1000000
    # Each share stays within a cent of its proportion of the actual total
    total = sum(percentages.values())
    for participant_id, percentage in percentages.items():
        assert abs(owed[participant_id] - Decimal(1000000) * percentage / total) < 1


def test_percentage_split_zero_percent_owes_nothing():
    policy = schemas.PercentageSplit(
        percentages={"A": Decimal("0"), "B": Decimal("33.33"), "C": Decimal("66.67")}
    )
    owed = calculate_split(make_expense(101, ["A", "B", "C"], policy))
    assert owed["A"] == 0
    assert sum(owed.values()) == 101


@pytest.mark.parametrize("split", [
    lambda: schemas.UnequalSplit(amounts={"A": 4000, "B": -1000}),
    lambda: schemas.PercentageSplit(percentages={"A": Decimal("110"), "B": Decimal("-10")}),
])
def test_negative_split_values_are_rejected(split):
    with pytest.raises(ValueError):
        split()
