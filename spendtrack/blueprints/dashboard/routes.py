from datetime import date
from flask import Blueprint, current_app, render_template
from flask_login import login_required, current_user
from ...services import aggregation
from ...services.snapshot import load_snapshot


dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/dashboard")


@dashboard_bp.route("/")
@login_required
def index():
    today = date.today()
    snap = load_snapshot(current_user.id, today)
    start, end = aggregation.month_bounds(today)

    month_total = aggregation.period_total(snap.records, start, end)
    budget_limit = snap.budget_limit
    status = aggregation.budget_status(month_total, budget_limit)
    ranking = aggregation.category_ranking(r for r in snap.records if start <= r.date <= end)
    monthly = aggregation.monthly_series(snap.records, today, current_app.config["MONTHLY_SERIES_MONTHS"])

    return render_template(
        "dashboard/index.html",
        month=today.strftime("%Y-%m"),
        month_total=month_total,
        budget_limit=budget_limit,
        remaining=aggregation.budget_remaining(month_total, budget_limit),
        status=status,
        top=ranking[0] if ranking else None,
        cat_rows=ranking,
        labels=[m.label for m in monthly],
        data=[float(m.amount) for m in monthly],
        recent=aggregation.recent_expenses(snap.records),
        expense_count=len(snap.records),
    )
