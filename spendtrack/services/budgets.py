"""Monthly budget reconciliation.

A user has at most one budget per calendar month. Writes go through the
store's atomic upsert on (user_id, year, month), so two tabs saving the same
month at once still leave a single row behind.
"""

from datetime import date

from flask import current_app

from .store import ExpenseStore
from .validation import parse_amount, validate_period


def set_monthly_budget(user_id, year, month, amount, store=None):
    """Validate and write the budget for one month, returning the stored row.

    Raises ``ValidationError`` before touching the database, and ``StoreError``
    (or ``RaceRetryExhausted``) when the write fails.
    """
    validate_period(year, month)
    minimum = current_app.config.get("BUDGET_MINIMUM_AMOUNT")
    amount = parse_amount(amount, minimum=minimum)

    store = store or ExpenseStore()
    budget = store.upsert_budget(user_id, year, month, amount)
    current_app.logger.info(
        "Budget %s set to %s for user %s", budget.period, budget.amount, user_id
    )
    return budget


def get_current_budget(user_id, now: date, store=None):
    """Budget for ``now``'s month, or ``None`` when none was set."""
    store = store or ExpenseStore()
    return store.find_budget(user_id, now.year, now.month)


def list_budgets(user_id, store=None):
    store = store or ExpenseStore()
    return store.list_budgets(user_id)
