"""Shared extensions."""
from __future__ import annotations

from flask_login import LoginManager
from flask_sqlalchemy import SQLAlchemy


db = SQLAlchemy()
login_manager = LoginManager()


@login_manager.unauthorized_handler
def unauthorized() -> tuple[dict, int]:
    # JSON API: answer 401 instead of redirecting to a login page.
    return {"message": "Authentication required"}, 401
