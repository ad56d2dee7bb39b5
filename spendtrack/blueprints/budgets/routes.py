from datetime import date
from flask import Blueprint, current_app, jsonify, render_template, request, redirect, url_for, flash
from flask_login import login_required, current_user
from ...errors import StoreError, ValidationError
from ...services import aggregation
from ...services.budgets import get_current_budget, list_budgets, set_monthly_budget
from ...services.store import ExpenseStore
from ...services.validation import parse_period

budgets_bp = Blueprint("budgets", __name__, url_prefix="/budgets")


@budgets_bp.route("/", methods=["GET", "POST"])
@login_required
def manage_budgets():
    today = date.today()
    if request.method == "POST":
        try:
            year, month = parse_period(request.form.get("month"), today)
            b = set_monthly_budget(current_user.id, year, month, request.form.get("amount"))
        except ValidationError as e:
            flash(e.message, "danger")
            return redirect(url_for("budgets.manage_budgets"))
        except StoreError:
            current_app.logger.exception("Budget write failed for user %s", current_user.id)
            flash("Could not save the budget, please try again", "danger")
            return redirect(url_for("budgets.manage_budgets"))
        flash(f"Budget for {b.period} set to {b.amount:.2f}", "success")
        return redirect(url_for("budgets.manage_budgets"))

    store = ExpenseStore()
    current = get_current_budget(current_user.id, today, store=store)
    start, end = aggregation.month_bounds(today)
    spent = aggregation.period_total(store.list_by_user_and_date_range(current_user.id, start, end), start, end)
    limit = current.amount if current else None
    return render_template(
        "budgets/list.html",
        month=today.strftime("%Y-%m"),
        current=current,
        spent=spent,
        status=aggregation.budget_status(spent, limit),
        remaining=aggregation.budget_remaining(spent, limit),
        budgets=list_budgets(current_user.id, store=store),
    )


@budgets_bp.route("/api", methods=["GET", "POST"])
@login_required
def budget_api():
    if request.method == "GET":
        b = get_current_budget(current_user.id, date.today())
        return jsonify({"ok": True, "budget": b.to_dict() if b else None})

    data = request.get_json(silent=True) or request.form
    if not hasattr(data, "get"):
        return jsonify({"ok": False, "error": "validation", "field": None,
                        "message": "Request body must be a JSON object"}), 400
    try:
        year, month = parse_period(data.get("month"), date.today())
        b = set_monthly_budget(current_user.id, year, month, data.get("amount"))
    except ValidationError as e:
        return jsonify({"ok": False, "error": "validation", "field": e.field, "message": e.message}), 400
    except StoreError as e:
        current_app.logger.exception("Budget API write failed for user %s", current_user.id)
        return jsonify({"ok": False, "error": "store", "message": str(e)}), 502
    return jsonify({"ok": True, "budget": b.to_dict()}), 200
