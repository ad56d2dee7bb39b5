from datetime import date
from flask import Blueprint, current_app, render_template, request, make_response, flash, redirect, url_for
from flask_login import login_required, current_user
from ...errors import ValidationError
from ...services import aggregation
from ...services.export import expenses_to_csv, export_filename
from ...services.snapshot import load_snapshot
from ...services.store import ExpenseStore
from ...services.validation import parse_period

reports_bp = Blueprint("reports", __name__, url_prefix="/reports")


@reports_bp.route("/")
@login_required
def index():
    today = date.today()
    snap = load_snapshot(current_user.id, today)
    cfg = current_app.config
    trend = aggregation.trend_delta(snap.records, today, cfg["TREND_WINDOW_DAYS"])
    daily = aggregation.daily_series(snap.records, today, cfg["DAILY_SERIES_DAYS"])
    ranking = aggregation.category_ranking(snap.records)
    return render_template(
        "reports/index.html",
        trend=trend,
        window_days=cfg["TREND_WINDOW_DAYS"],
        daily=list(daily),
        labels=[d.date.strftime("%a") for d in daily],
        data=[float(d.amount) for d in daily],
        categories=ranking[:5],
        projection=aggregation.spending_projection(snap.records, today),
        month=today.strftime("%Y-%m"),
    )


@reports_bp.route("/export.csv")
@login_required
def export_csv():
    try:
        year, month = parse_period(request.args.get("month"), date.today())
    except ValidationError as e:
        flash(e.message, "danger")
        return redirect(url_for("reports.index"))
    start, end = aggregation.month_bounds(date(year, month, 1))
    rows = ExpenseStore().list_by_user_and_date_range(current_user.id, start, end)
    response = make_response(expenses_to_csv(rows))
    response.headers["Content-Disposition"] = f"attachment; filename={export_filename(year, month)}"
    response.headers["Content-Type"] = "text/csv"
    return response
