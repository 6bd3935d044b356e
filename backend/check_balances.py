#!/usr/bin/env python3
"""
Print the balances and settlement plan of a ride straight from the database
"""
import argparse

from fastapi import HTTPException
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from utils.balances import compute_balances, summarize_expenses
from utils.currency import format_currency
from utils.display import describe_participant_balance, describe_settlement
from utils.settlements import plan_settlements
from utils.store import expense_from_row, get_ride_participants, load_ride_expenses
from utils.validation import get_ride_or_404


def report_ride(db: Session, ride_id: str) -> list[str]:
    """Lines describing who owes what in a ride and how to settle up."""
    ride = get_ride_or_404(db, ride_id)
    participants = get_ride_participants(db, ride_id)
    expenses = [expense_from_row(expense, splits) for expense, splits in load_ride_expenses(db, ride_id)]

    names = {p.id: p.name for p in participants}
    balances = compute_balances(list(names), expenses)
    summary = summarize_expenses(list(names), expenses)

    lines = [
        f"RIDE {ride.id}: {ride.name}",
        f"{summary.expense_count} expenses, total {format_currency(summary.total_expenses, ride.currency)}, "
        f"{format_currency(summary.per_person_share, ride.currency)} per person",
        "",
        "Balances:"
    ]
    for participant_id, amount in balances.items():
        lines.append(f"  {describe_participant_balance(names[participant_id], amount, ride.currency)}")

    lines.append("")
    lines.append("Settlements:")
    settlements = plan_settlements(balances)
    if not settlements:
        lines.append("  Everyone is settled up")
    for settlement in settlements:
        lines.append(f"  {describe_settlement(settlement, names, ride.currency)}")

    return lines


def main(argv=None):
    parser = argparse.ArgumentParser(description="Show balances and settlements for a ride")
    parser.add_argument("ride_id", help="ID of the ride")
    parser.add_argument("--db-path", default="ridepool.sqlite3", help="Path to SQLite database file")
    args = parser.parse_args(argv)

    engine = create_engine(f"sqlite:///{args.db_path}")
    db = sessionmaker(bind=engine)()
    try:
        print("\n".join(report_ride(db, args.ride_id)))
    except HTTPException as e:
        parser.exit(1, f"{e.detail}\n")
    finally:
        db.close()


if __name__ == "__main__":
    main()
