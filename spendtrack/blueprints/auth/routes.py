from datetime import date
from flask import Blueprint, render_template, request, redirect, url_for, flash
from flask_login import login_user, logout_user, login_required, current_user
from ...extensions import db
from ...models import User
from ...services import aggregation
from ...services.snapshot import load_snapshot

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


@auth_bp.route("/register", methods=["GET", "POST"])
def register():
    if request.method == "POST":
        name = (request.form.get("name") or "").strip()
        email = User.normalize_email(request.form.get("email"))
        password = request.form.get("password")
        if not all([name, email, password]):
            flash("All fields are required", "danger")
            return render_template("auth/register.html"), 400
        if User.find_by_email(email):
            flash("Email already registered", "warning")
            return render_template("auth/register.html"), 400
        user = User(name=name, email=email)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        flash("Registration successful. Please log in.", "success")
        return redirect(url_for("auth.login"))
    return render_template("auth/register.html")


@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    if request.method == "POST":
        email = User.normalize_email(request.form.get("email"))
        password = request.form.get("password") or ""
        user = User.find_by_email(email)
        if user and user.check_password(password):
            login_user(user)
            flash("Logged in successfully", "success")
            return redirect(url_for("dashboard.index"))
        flash("Invalid credentials", "danger")
    return render_template("auth/login.html")


@auth_bp.route("/logout")
@login_required
def logout():
    logout_user()
    flash("Logged out", "info")
    return redirect(url_for("auth.login"))


@auth_bp.route("/profile")
@login_required
def profile():
    today = date.today()
    snap = load_snapshot(current_user.id, today)
    start, end = aggregation.month_bounds(today)
    month_records = [r for r in snap.records if start <= r.date <= end]
    projection = aggregation.spending_projection(snap.records, today)
    return render_template(
        "auth/profile.html",
        user=current_user,
        month_total=projection.month_total,
        average_daily=projection.average_daily,
        top=aggregation.top_category(month_records),
        expense_count=len(snap.records),
        budget=snap.budget,
    )
