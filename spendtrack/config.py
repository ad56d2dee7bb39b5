import os
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")


def _optional(name):
    value = os.getenv(name)
    return value if value not in (None, "") else None


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'spendtrack.db'}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Budget reconciliation
    BUDGET_MINIMUM_AMOUNT = _optional("BUDGET_MINIMUM_AMOUNT")  # unset: any amount > 0
    BUDGET_UPSERT_STRATEGY = os.getenv("BUDGET_UPSERT_STRATEGY", "native")  # native/insert_retry

    # Aggregation windows
    TREND_WINDOW_DAYS = int(os.getenv("TREND_WINDOW_DAYS", "30"))
    DAILY_SERIES_DAYS = int(os.getenv("DAILY_SERIES_DAYS", "7"))
    MONTHLY_SERIES_MONTHS = int(os.getenv("MONTHLY_SERIES_MONTHS", "6"))


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    BUDGET_MINIMUM_AMOUNT = None
    BUDGET_UPSERT_STRATEGY = "native"
