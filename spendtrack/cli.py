from datetime import date, timedelta
from decimal import Decimal

import click
from flask import current_app
from flask.cli import with_appcontext

from .models import Category, User
from .services.budgets import set_monthly_budget
from .services.store import ExpenseStore

DEMO_EXPENSES = [
    (Category.FOOD, "250", "Lunch", 0),
    (Category.TRANSPORTATION, "320", "Cab to office", 1),
    (Category.UTILITIES, "1800", "Electricity bill", 3),
    (Category.SHOPPING, "2200", "Shoes", 5),
    (Category.ENTERTAINMENT, "499", "Movie night", 12),
    (Category.HEALTH, "650", "Pharmacy", 35),
    (Category.FOOD, "1200", "Groceries", 40),
]


@click.command("seed-demo")
@click.option("--email", required=True, help="Email of an existing account.")
@click.option("--budget", default="20000", show_default=True, help="Budget for the current month.")
@with_appcontext
def seed_demo_cmd(email, budget):
    """Seed sample expenses and a monthly budget for an existing user."""
    user = User.query.filter_by(email=email).first()
    if user is None:
        raise click.ClickException(f"No user with email {email}")

    store = ExpenseStore()
    today = date.today()
    if store.list_by_user(user.id):
        click.echo("User already has expenses; skipping expense seed")
    else:
        for category, amount, description, days_ago in DEMO_EXPENSES:
            store.insert(
                user.id,
                category=category.value,
                amount=Decimal(amount),
                date=today - timedelta(days=days_ago),
                description=description,
            )
        click.echo(f"Seeded {len(DEMO_EXPENSES)} expenses")

    b = set_monthly_budget(user.id, today.year, today.month, budget, store=store)
    current_app.logger.info("Demo data seeded for %s", email)
    click.echo(f"Budget {b.period} set to {b.amount}")


def register_cli(app):
    app.cli.add_command(seed_demo_cmd)
