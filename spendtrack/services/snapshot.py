from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Tuple

from .budgets import get_current_budget
from .store import ExpenseStore


@dataclass(frozen=True)
class Snapshot:
    """A user's records and current budget, loaded once per request."""

    records: Tuple[Any, ...]
    budget: Optional[Any]
    loaded_on: date

    @property
    def budget_limit(self):
        return self.budget.amount if self.budget is not None else None


def load_snapshot(user_id, now: date, store=None) -> Snapshot:
    store = store or ExpenseStore()
    records = tuple(store.list_by_user(user_id))
    budget = get_current_budget(user_id, now, store=store)
    return Snapshot(records=records, budget=budget, loaded_on=now)
