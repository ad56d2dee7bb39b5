"""Database access for expenses and budgets.

All reads and writes the application performs go through ``ExpenseStore``.
SQLAlchemy failures are rolled back and re-raised as ``StoreError`` with the
driver message, so callers only deal with the application's error types.
"""

from datetime import datetime

from flask import current_app
from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import NotFound, RaceRetryExhausted, StoreError
from ..extensions import db
from ..models import Budget, Expense

EXPENSE_FIELDS = ("category", "amount", "date", "description")

_UPSERT_DIALECTS = {
    "sqlite": sqlite_insert,
    "postgresql": pg_insert,
}


def _store_error(exc):
    return StoreError(str(getattr(exc, "orig", None) or exc))


class ExpenseStore:
    def __init__(self, session=None, upsert_strategy=None):
        self.session = session or db.session
        self.upsert_strategy = upsert_strategy or current_app.config.get("BUDGET_UPSERT_STRATEGY", "native")

    def _commit(self):
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise _store_error(e) from e

    def _scalars(self, stmt):
        try:
            return self.session.execute(stmt).scalars().all()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise _store_error(e) from e

    # --- expenses -------------------------------------------------------

    def list_by_user(self, user_id):
        return self._scalars(
            select(Expense)
            .filter_by(user_id=user_id)
            .order_by(Expense.date.desc(), Expense.id.desc())
        )

    def list_by_user_and_date_range(self, user_id, start, end):
        return self._scalars(
            select(Expense)
            .where(Expense.user_id == user_id, Expense.date >= start, Expense.date <= end)
            .order_by(Expense.date.desc(), Expense.id.desc())
        )

    def get(self, user_id, expense_id):
        rows = self._scalars(select(Expense).filter_by(id=expense_id, user_id=user_id))
        if not rows:
            raise NotFound(f"Expense {expense_id} not found")
        return rows[0]

    def insert(self, user_id, **fields):
        exp = Expense(user_id=user_id, **{k: fields[k] for k in EXPENSE_FIELDS if k in fields})
        self.session.add(exp)
        self._commit()
        return exp

    def update(self, user_id, expense_id, **changes):
        exp = self.get(user_id, expense_id)
        for key in EXPENSE_FIELDS:
            if key in changes:
                setattr(exp, key, changes[key])
        self._commit()
        return exp

    def delete(self, user_id, expense_id):
        exp = self.get(user_id, expense_id)
        self.session.delete(exp)
        self._commit()

    # --- budgets --------------------------------------------------------

    def find_budget(self, user_id, year, month):
        rows = self._scalars(
            select(Budget)
            .filter_by(user_id=user_id, year=year, month=month)
            .execution_options(populate_existing=True)
        )
        return rows[0] if rows else None

    def list_budgets(self, user_id):
        return self._scalars(
            select(Budget)
            .filter_by(user_id=user_id)
            .order_by(Budget.year.desc(), Budget.month.desc())
        )

    def upsert_budget(self, user_id, year, month, amount):
        """Write the budget for (user, year, month) and return the stored row.

        Uses the dialect's ``INSERT ... ON CONFLICT DO UPDATE`` when available,
        otherwise inserts and turns a unique-constraint violation into an update.
        """
        dialect = self.session.get_bind().dialect.name
        insert_fn = _UPSERT_DIALECTS.get(dialect)
        if self.upsert_strategy == "native" and insert_fn is not None:
            self._native_upsert(insert_fn, user_id, year, month, amount)
        else:
            self._insert_or_update(user_id, year, month, amount)

        budget = self.find_budget(user_id, year, month)
        if budget is None:
            raise StoreError(f"Budget {year:04d}-{month:02d} missing after write")
        return budget

    def _native_upsert(self, insert_fn, user_id, year, month, amount):
        now = datetime.utcnow()
        stmt = insert_fn(Budget).values(
            user_id=user_id, year=year, month=month, amount=amount, created_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "year", "month"],
            set_={"amount": stmt.excluded.amount, "updated_at": now},
        )
        try:
            self.session.execute(stmt)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise _store_error(e) from e
        self._commit()

    def _insert_or_update(self, user_id, year, month, amount):
        self.session.add(Budget(user_id=user_id, year=year, month=month, amount=amount))
        try:
            self.session.commit()
            return
        except IntegrityError:
            self.session.rollback()
            current_app.logger.info(
                "Budget %04d-%02d exists for user %s, updating", year, month, user_id
            )
        except SQLAlchemyError as e:
            self.session.rollback()
            raise _store_error(e) from e

        stmt = (
            update(Budget)
            .where(Budget.user_id == user_id, Budget.year == year, Budget.month == month)
            .values(amount=amount, updated_at=datetime.utcnow())
        )
        try:
            updated = self.session.execute(stmt).rowcount
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            current_app.logger.exception("Budget update retry failed")
            raise RaceRetryExhausted(str(getattr(e, "orig", None) or e)) from e
        if not updated:
            current_app.logger.error(
                "Budget %04d-%02d for user %s vanished between insert and update",
                year, month, user_id,
            )
            raise RaceRetryExhausted(f"Budget {year:04d}-{month:02d} could not be written")
