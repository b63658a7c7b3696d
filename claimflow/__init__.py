"""Application factory and extension initialization for ClaimFlow."""
from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

from config import config_by_name

# Global extension instances -------------------------------------------------

db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()


def create_app(config_name: Optional[str] = None) -> Flask:
    """Flask application factory."""
    load_dotenv()

    app = Flask(__name__, instance_relative_config=True)

    config_name = config_name or os.getenv("FLASK_CONFIG", "development")
    config_class = config_by_name.get(config_name.lower())
    if config_class is None:
        raise ValueError(f"Unknown Flask configuration '{config_name}'")

    app.config.from_object(config_class)

    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("claimflow").setLevel(app.config["LOG_LEVEL"])

    # Ensure instance folder exists for SQLite DBs
    os.makedirs(app.instance_path, exist_ok=True)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    # Register blueprints
    from claimflow.users import users_bp
    from claimflow.claims import claims_bp
    from claimflow.approvals import approvals_bp
    from claimflow.analytics import analytics_bp

    app.register_blueprint(users_bp)
    app.register_blueprint(claims_bp)
    app.register_blueprint(approvals_bp)
    app.register_blueprint(analytics_bp)

    from claimflow.errors import ClaimFlowError
    from claimflow.utils.helpers import json_response

    @app.errorhandler(ClaimFlowError)
    def handle_claimflow_error(error: ClaimFlowError):
        return json_response({"error": error.message}, status=error.status_code)

    # Acting identity for Flask-Login; there is no credential check.
    from claimflow.models import User

    @login_manager.request_loader
    def load_user_from_request(request) -> Optional[User]:
        user_id = request.headers.get("X-User-Id", "")
        if not user_id.isdigit():
            return None
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return json_response({"error": "Authentication required."}, status=401)

    from claimflow.cli import register_commands

    register_commands(app)

    @app.shell_context_processor
    def shell_context():
        return {"db": db, "User": User}

    return app
