"""Authentication blueprint."""
from __future__ import annotations

from flask import Blueprint, abort, current_app, request
from flask_login import login_required, login_user, logout_user

from .extensions import db
from .failed_login import LoginAttemptTracker
from .models import User


auth_bp = Blueprint("auth", __name__)


def _tracker() -> LoginAttemptTracker:
    return current_app.failed_login_tracker


def _validate_credentials_payload(data) -> tuple[str, str]:
    if not isinstance(data, dict):
        abort(400, description="Expected a JSON object")
    for field in ("email", "password"):
        if field not in data or not data[field]:
            abort(400, description=f"Missing field: {field}")
        if not isinstance(data[field], str):
            abort(400, description=f"Invalid field: {field}")
    return data["email"].strip().lower(), data["password"]


def _locked_response(email: str) -> tuple[dict, int, dict]:
    retry_after = _tracker().get_remaining_lockout_time(email)
    body = {
        "message": "Too many failed login attempts. Try again later.",
        "retry_after": retry_after,
    }
    return body, 429, {"Retry-After": str(retry_after)}


@auth_bp.route("/signup", methods=["POST"])
def signup() -> tuple[dict, int]:
    payload = request.get_json(silent=True) or {}
    email, password = _validate_credentials_payload(payload)

    if User.query.filter_by(email=email).first():
        abort(400, description="Email already registered")

    user = User(email=email)
    user.set_password(password)

    db.session.add(user)
    db.session.commit()

    return {"message": "Account created"}, 201


@auth_bp.route("/login", methods=["POST"])
def login():
    payload = request.get_json(silent=True) or {}
    email, password = _validate_credentials_payload(payload)
    tracker = _tracker()

    # Locked accounts are rejected before the password is looked at.
    if tracker.is_locked_out(email):
        current_app.logger.info("Rejected login for locked account %s", email)
        return _locked_response(email)

    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(password):
        tracker.record_failure(email)
        current_app.logger.info(
            "Failed login for %s (%d consecutive)", email, tracker.get_failure_count(email)
        )
        if tracker.is_locked_out(email):
            return _locked_response(email)
        return {
            "message": "Invalid credentials",
            "remaining_attempts": tracker.get_remaining_attempts(email),
        }, 401

    tracker.reset_attempts(email)
    login_user(user)
    return {"message": "Logged in"}, 200


@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout() -> tuple[dict, int]:
    logout_user()
    return {"message": "Logged out"}, 200


@auth_bp.route("/lockout-status", methods=["GET"])
def lockout_status() -> tuple[dict, int]:
    email = request.args.get("email", "").strip().lower()
    if not email:
        abort(400, description="Email required")

    tracker = _tracker()
    locked = tracker.is_locked_out(email)
    return {
        "locked": locked,
        "remaining_attempts": tracker.get_remaining_attempts(email),
        "retry_after": tracker.get_remaining_lockout_time(email) if locked else 0,
    }, 200
