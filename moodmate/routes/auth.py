"""/api/auth routes handling registration, login and profile management."""

from __future__ import annotations

from typing import Any, Dict

from flask import Blueprint, jsonify, request

from moodmate.services import auth_service
from moodmate.utils.auth import SESSION_HEADER, current_stores, require_session, session_token

bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def _payload() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


@bp.post("/register")
def register():
    """Create an account and store only the password digest."""
    payload = _payload()
    user = auth_service.register(
        current_stores(),
        payload.get("name"),
        payload.get("email"),
        payload.get("password"),
    )
    return jsonify(success=True, message="User registered successfully.", data=user), 200


@bp.post("/login")
def login():
    """Validate credentials and issue a session token."""
    payload = _payload()
    token, user = auth_service.login(current_stores(), payload.get("email"), payload.get("password"))

    response = jsonify(
        success=True,
        message="Login successful.",
        data={"sessionId": token, "user": user},
    )
    response.headers[SESSION_HEADER] = token
    return response, 200


@bp.get("/profile")
def get_profile():
    session, error_response = require_session()
    if error_response is not None:
        return error_response

    user = auth_service.get_profile(current_stores(), session)
    return jsonify(success=True, message="Profile retrieved.", data={"user": user}), 200


@bp.put("/profile")
def update_profile():
    session, error_response = require_session()
    if error_response is not None:
        return error_response

    user = auth_service.update_profile(current_stores(), session, _payload().get("name"))
    return jsonify(success=True, message="Profile updated.", data={"user": user}), 200


@bp.put("/change-password")
def change_password():
    session, error_response = require_session()
    if error_response is not None:
        return error_response

    payload = _payload()
    result = auth_service.change_password(
        current_stores(),
        session,
        payload.get("currentPassword"),
        payload.get("newPassword"),
    )
    return jsonify(success=True, message="Password changed.", data=result), 200


@bp.post("/logout")
def logout():
    """End the current session. Unknown or missing tokens still succeed."""
    auth_service.logout(current_stores(), session_token())
    return jsonify(success=True, message="Logout successful."), 200
