import random

import pytest

from utils.settlements import apply_settlements, plan_settlements


def as_tuples(settlements):
    return [(s.from_id, s.to_id, s.amount) for s in settlements]


def test_single_creditor():
    settlements = plan_settlements({"A": 6000, "B": -3000, "C": -3000})
    assert as_tuples(settlements) == [("B", "A", 3000), ("C", "A", 3000)]


def test_largest_debtor_pays_largest_creditor_first():
    balances = {"A": 1000, "B": 5000, "C": -4000, "D": -2000}
    settlements = plan_settlements(balances)
    assert as_tuples(settlements) == [
        ("C", "B", 4000),
        ("D", "B", 1000),
        ("D", "A", 1000),
    ]


def test_ties_keep_balance_map_order():
    settlements = plan_settlements({"X": -1000, "A": 1000, "Y": -1000, "B": 1000})
    assert as_tuples(settlements) == [("X", "A", 1000), ("Y", "B", 1000)]


def test_settled_participants_are_ignored():
    settlements = plan_settlements({"A": 1, "B": -1, "C": 0})
    assert settlements == []


def test_empty_balances():
    assert plan_settlements({}) == []


def test_no_self_payments():
    settlements = plan_settlements({"A": 2500, "B": -2500})
    assert as_tuples(settlements) == [("B", "A", 2500)]
    assert all(s.from_id != s.to_id for s in settlements)


def test_apply_settlements_zeroes_balances():
    balances = {"A": 1000, "B": 5000, "C": -4000, "D": -2000}
    remaining = apply_settlements(balances, plan_settlements(balances))
    assert remaining == {"A": 0, "B": 0, "C": 0, "D": 0}
    # Input is left untouched
    assert balances["B"] == 5000


def random_balances(rng):
    """Zero-sum balances where every creditor and debtor is off by more than a cent."""
    credits = [rng.randint(100, 50000) for _ in range(rng.randint(1, 4))]
    total = sum(credits)

    # Cut the total into debts of at least 2 cents each
    count = rng.randint(1, 4)
    spare = total - 2 * count
    cuts = sorted(rng.randint(0, spare) for _ in range(count - 1))
    debts = [b - a + 2 for a, b in zip([0] + cuts, cuts + [spare])]

    amounts = credits + [-debt for debt in debts]
    rng.shuffle(amounts)
    return {f"p{i}": amount for i, amount in enumerate(amounts)}


@pytest.mark.parametrize("seed", range(20))
def test_random_balances_settle_within_bounds(seed):
    balances = random_balances(random.Random(seed))
    assert sum(balances.values()) == 0

    settlements = plan_settlements(balances)

    assert len(settlements) <= len(balances) - 1
    assert all(s.amount > 0 for s in settlements)
    assert all(s.from_id != s.to_id for s in settlements)

    owed = sum(a for a in balances.values() if a > 0)
    paid = sum(s.amount for s in settlements)
    assert 0 <= owed - paid <= len(balances)

    remaining = apply_settlements(balances, settlements)
    assert all(abs(amount) <= 1 for amount in remaining.values())
