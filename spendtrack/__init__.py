import logging

from flask import Flask, redirect, url_for
from .extensions import db, migrate, login_manager
from .config import Config

from .blueprints.auth.routes import auth_bp
from .blueprints.dashboard.routes import dashboard_bp
from .blueprints.expenses.routes import expenses_bp
from .blueprints.budgets.routes import budgets_bp
from .blueprints.reports.routes import reports_bp
from .cli import register_cli
from .models import Category


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    # Ensure tables exist for a smooth first run
    with app.app_context():
        db.create_all()

    # Register blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(expenses_bp)
    app.register_blueprint(budgets_bp)
    app.register_blueprint(reports_bp)
    register_cli(app)

    @app.context_processor
    def inject_categories():
        return {"category_choices": Category.choices()}

    @app.template_filter("money")
    def money(value):
        if value is None:
            return "-"
        return f"₹{value:,.2f}"

    @app.route("/")
    def root():
        return redirect(url_for("dashboard.index"))

    app.logger.debug("SpendTrack app created with %s", getattr(config_object, "__name__", config_object))
    return app
