from datetime import date
from decimal import Decimal

from spendtrack.errors import StoreError
from spendtrack.models import Budget, Expense


def _today_str():
    return date.today().isoformat()


def test_root_redirects_to_dashboard(client):
    resp = client.get("/")
    assert resp.status_code == 302
    assert "/dashboard/" in resp.headers["Location"]


def test_dashboard_requires_login(client):
    resp = client.get("/dashboard/")
    assert resp.status_code == 302
    assert "/auth/login" in resp.headers["Location"]


def test_register_then_login(client):
    resp = client.post("/auth/register", data={"name": "Ravi", "email": "Ravi@Example.com", "password": "pw"})
    assert resp.status_code == 302
    resp = client.post("/auth/login", data={"email": "ravi@example.com", "password": "pw"})
    assert resp.status_code == 302
    assert client.get("/dashboard/").status_code == 200


def test_register_rejects_duplicate_email(client, user_id):
    resp = client.post("/auth/register", data={"name": "Asha", "email": "asha@example.com", "password": "x"})
    assert resp.status_code == 400
    assert b"Email already registered" in resp.data


def test_empty_dashboard_renders(logged_in):
    resp = logged_in.get("/dashboard/")
    assert resp.status_code == 200
    assert b"No Budget Set" in resp.data
    assert b"No expenses this month" in resp.data


def test_add_expense_and_see_it_on_dashboard(app, logged_in):
    resp = logged_in.post("/expenses/create", data={
        "category": "Food", "amount": "250", "date": _today_str(), "description": "Lunch",
    })
    assert resp.status_code == 302
    with app.app_context():
        assert Expense.query.count() == 1

    page = logged_in.get("/dashboard/")
    assert b"Lunch" in page.data
    assert b"Food &amp; Dining" in page.data


def test_add_expense_validation_error(app, logged_in):
    resp = logged_in.post("/expenses/create", data={
        "category": "Food", "amount": "-3", "date": _today_str(), "description": "Lunch",
    })
    assert resp.status_code == 400
    assert b"Amount must be greater than zero" in resp.data
    with app.app_context():
        assert Expense.query.count() == 0


def test_edit_and_delete_expense(app, logged_in):
    logged_in.post("/expenses/create", data={
        "category": "Travel", "amount": "100", "date": "2024-03-01", "description": "Train",
    })
    with app.app_context():
        exp_id = Expense.query.one().id

    assert logged_in.get(f"/expenses/{exp_id}/edit").status_code == 200
    resp = logged_in.post(f"/expenses/{exp_id}/edit", data={
        "category": "Travel", "amount": "120", "date": "2024-03-01", "description": "Train",
    })
    assert resp.status_code == 302
    with app.app_context():
        assert Expense.query.one().amount == Decimal("120.00")

    assert logged_in.post(f"/expenses/{exp_id}/delete").status_code == 302
    assert logged_in.post(f"/expenses/{exp_id}/delete").status_code == 404


def test_set_budget_form_twice_keeps_one_row(app, logged_in):
    month = date.today().strftime("%Y-%m")
    logged_in.post("/budgets/", data={"month": month, "amount": "1000"})
    logged_in.post("/budgets/", data={"month": month, "amount": "1500"})
    with app.app_context():
        rows = Budget.query.all()
        assert len(rows) == 1
        assert rows[0].amount == Decimal("1500.00")

    page = logged_in.get("/budgets/")
    assert page.status_code == 200
    assert b"Within Budget" in page.data


def test_budget_status_on_dashboard(logged_in):
    month = date.today().strftime("%Y-%m")
    logged_in.post("/budgets/", data={"month": month, "amount": "1000"})
    logged_in.post("/expenses/create", data={
        "category": "Shopping", "amount": "800", "date": _today_str(), "description": "Shoes",
    })
    assert b"Budget Warning" in logged_in.get("/dashboard/").data


def test_budget_api_returns_stored_record(logged_in):
    resp = logged_in.post("/budgets/api", json={"month": "2024-03", "amount": 1500})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["ok"] is True
    assert body["budget"]["year"] == 2024
    assert body["budget"]["month"] == 3
    assert Decimal(body["budget"]["amount"]) == Decimal("1500")


def test_budget_api_validation_error(logged_in):
    resp = logged_in.post("/budgets/api", json={"month": "2024-03", "amount": 0})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation"


def test_budget_api_store_error(logged_in, monkeypatch):
    def fail(*args, **kwargs):
        raise StoreError("connection refused")

    monkeypatch.setattr("spendtrack.blueprints.budgets.routes.set_monthly_budget", fail)
    resp = logged_in.post("/budgets/api", json={"month": "2024-03", "amount": 1000})
    assert resp.status_code == 502
    body = resp.get_json()
    assert body["error"] == "store"
    assert body["message"] == "connection refused"


def test_budget_api_get_absent(logged_in):
    resp = logged_in.get("/budgets/api")
    assert resp.get_json() == {"ok": True, "budget": None}


def test_reports_and_profile_render(logged_in):
    logged_in.post("/expenses/create", data={
        "category": "Health", "amount": "50", "date": _today_str(), "description": "Pharmacy",
    })
    resp = logged_in.get("/reports/")
    assert resp.status_code == 200
    assert b"30-day trend" in resp.data
    profile = logged_in.get("/auth/profile")
    assert profile.status_code == 200
    assert b"Health &amp; Medical" in profile.data


def test_export_csv_for_month(logged_in):
    logged_in.post("/expenses/create", data={
        "category": "Food", "amount": "99.90", "date": "2024-03-05", "description": "Dinner, drinks",
    })
    logged_in.post("/expenses/create", data={
        "category": "Food", "amount": "10", "date": "2024-04-05", "description": "April",
    })
    resp = logged_in.get("/reports/export.csv?month=2024-03")
    assert resp.status_code == 200
    assert resp.headers["Content-Type"].startswith("text/csv")
    assert "expenses-2024-03.csv" in resp.headers["Content-Disposition"]
    assert resp.get_data(as_text=True) == 'Date,Category,Description,Amount\n2024-03-05,Food,"Dinner, drinks",99.90\n'


def test_seed_demo_cli(app, user_id):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["seed-demo", "--email", "asha@example.com", "--budget", "5000"])
    assert result.exit_code == 0, result.output
    assert "Seeded 7 expenses" in result.output
    with app.app_context():
        assert Expense.query.count() == 7
        assert Budget.query.one().amount == Decimal("5000.00")

    again = runner.invoke(args=["seed-demo", "--email", "asha@example.com"])
    assert again.exit_code == 0
    assert "skipping" in again.output
    with app.app_context():
        assert Expense.query.count() == 7
        assert Budget.query.count() == 1


def test_seed_demo_cli_unknown_user(app):
    result = app.test_cli_runner().invoke(args=["seed-demo", "--email", "nobody@example.com"])
    assert result.exit_code != 0
    assert "No user with email" in result.output


def test_budget_api_rejects_oversized_amount(app, logged_in):
    resp = logged_in.post("/budgets/api", json={"month": "2024-03", "amount": "1e30"})
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"] == "validation"
    assert body["field"] == "amount"
    with app.app_context():
        assert Budget.query.count() == 0


def test_budget_api_rejects_non_object_body(logged_in):
    resp = logged_in.post("/budgets/api", json=[1, 2])
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation"

    resp = logged_in.post("/budgets/api", json="1500")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation"


def test_add_expense_rejects_oversized_amount(app, logged_in):
    resp = logged_in.post("/expenses/create", data={
        "category": "Food", "amount": "9" * 29, "date": _today_str(), "description": "Typo",
    })
    assert resp.status_code == 400
    assert b"Amount is too large" in resp.data
    with app.app_context():
        assert Expense.query.count() == 0


def test_expense_search_filters_list(logged_in):
    for category, amount, description in [
        ("Food", "250", "Team lunch"),
        ("Transportation", "40", "Metro card"),
    ]:
        logged_in.post("/expenses/create", data={
            "category": category, "amount": amount, "date": _today_str(), "description": description,
        })

    page = logged_in.get("/expenses/?q=LUNCH")
    assert b"Team lunch" in page.data
    assert b"Metro card" not in page.data

    page = logged_in.get("/expenses/?q=transport")
    assert b"Metro card" in page.data
    assert b"Team lunch" not in page.data

    page = logged_in.get("/expenses/?q=rent")
    assert b"No expenses found matching your search." in page.data

    page = logged_in.get("/expenses/")
    assert b"Team lunch" in page.data and b"Metro card" in page.data


def test_budget_form_accepts_cents(logged_in):
    page = logged_in.get("/budgets/")
    assert b'step="0.01"' in page.data
