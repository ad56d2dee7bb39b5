from ..errors import ValidationError
from ..models import Category
from .store import ExpenseStore
from .validation import parse_amount, parse_date


def validate_expense_form(form, default_date=None):
    """Clean add/edit form input into store fields."""
    category_raw = (form.get("category") or "").strip()
    if not category_raw:
        raise ValidationError("Category is required", field="category")
    description = (form.get("description") or "").strip()
    if not description:
        raise ValidationError("Description is required", field="description")
    return {
        "category": Category.normalize(category_raw).value,
        "amount": parse_amount(form.get("amount")),
        "date": parse_date(form.get("date"), default=default_date),
        "description": description,
    }


def add_expense(user_id, form, store=None):
    fields = validate_expense_form(form)
    store = store or ExpenseStore()
    return store.insert(user_id, **fields)


def edit_expense(user_id, expense_id, form, store=None):
    store = store or ExpenseStore()
    current = store.get(user_id, expense_id)
    fields = validate_expense_form(form, default_date=current.date)
    return store.update(user_id, expense_id, **fields)


def remove_expense(user_id, expense_id, store=None):
    store = store or ExpenseStore()
    store.delete(user_id, expense_id)


def search_expenses(records, term):
    """Case-insensitive substring match on description or category."""
    needle = (term or "").strip().lower()
    if not needle:
        return list(records)
    return [
        r for r in records
        if needle in (r.description or "").lower() or needle in (r.category or "").lower()
    ]
