from flask import Blueprint, abort, current_app, render_template, request, redirect, url_for, flash
from flask_login import login_required, current_user
from ...errors import NotFound, StoreError, ValidationError
from ...services.expenses import add_expense, edit_expense, remove_expense, search_expenses
from ...services.store import ExpenseStore


expenses_bp = Blueprint("expenses", __name__, url_prefix="/expenses")


@expenses_bp.route("/")
@login_required
def list_expenses():
    q = (request.args.get("q") or "").strip()
    expenses = search_expenses(ExpenseStore().list_by_user(current_user.id), q)
    total = sum((e.amount for e in expenses), 0)
    return render_template("expenses/list.html", expenses=expenses, total=total, q=q)


@expenses_bp.route("/create", methods=["GET", "POST"])
@login_required
def create_expense():
    if request.method == "POST":
        try:
            exp = add_expense(current_user.id, request.form)
        except ValidationError as e:
            flash(e.message, "danger")
            return render_template("expenses/form.html", form=request.form), 400
        except StoreError:
            current_app.logger.exception("Expense insert failed")
            flash("Could not save the expense, please try again", "danger")
            return render_template("expenses/form.html", form=request.form), 502
        flash(f"Expense of {exp.amount:.2f} added", "success")
        return redirect(url_for("expenses.list_expenses"))

    return render_template("expenses/form.html", form={})


@expenses_bp.route("/<int:expense_id>/edit", methods=["GET", "POST"])
@login_required
def edit(expense_id):
    store = ExpenseStore()
    try:
        exp = store.get(current_user.id, expense_id)
    except NotFound:
        abort(404)

    if request.method == "POST":
        try:
            edit_expense(current_user.id, expense_id, request.form, store=store)
        except ValidationError as e:
            flash(e.message, "danger")
            return render_template("expenses/form.html", expense=exp, form=request.form), 400
        except StoreError:
            current_app.logger.exception("Expense %s update failed", expense_id)
            flash("Could not update the expense, please try again", "danger")
            return render_template("expenses/form.html", expense=exp, form=request.form), 502
        flash("Expense updated", "success")
        return redirect(url_for("expenses.list_expenses"))

    form = {
        "category": exp.category,
        "amount": f"{exp.amount:.2f}",
        "date": exp.date.isoformat(),
        "description": exp.description,
    }
    return render_template("expenses/form.html", expense=exp, form=form)


@expenses_bp.route("/<int:expense_id>/delete", methods=["POST"])
@login_required
def delete(expense_id):
    try:
        remove_expense(current_user.id, expense_id)
    except NotFound:
        abort(404)
    except StoreError:
        current_app.logger.exception("Expense %s delete failed", expense_id)
        flash("Could not delete the expense, please try again", "danger")
        return redirect(url_for("expenses.list_expenses"))
    flash("Expense deleted", "info")
    return redirect(url_for("expenses.list_expenses"))
