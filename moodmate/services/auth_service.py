"""User registration, login and profile management on top of the user collection."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from moodmate.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from moodmate.storage import RecordNotFoundError, Stores
from moodmate.utils.auth import hash_password, verify_password

_LOGGER = logging.getLogger(__name__)

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 100


def public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    """Return the user fields that may leave the server (never the digest)."""
    public = {
        "id": user["id"],
        "name": user["name"],
        "email": user["email"],
        "createdAt": user.get("createdAt"),
    }
    if user.get("updatedAt"):
        public["updatedAt"] = user["updatedAt"]
    return public


def _require_text(value: Any, message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value


def validate_name(name: Any) -> str:
    """Trim a display name and enforce its length window."""
    trimmed = _require_text(name, "Name must not be empty.").strip()
    if len(trimmed) < NAME_MIN_LENGTH:
        raise ValidationError(f"Name must be at least {NAME_MIN_LENGTH} characters.")
    if len(trimmed) > NAME_MAX_LENGTH:
        raise ValidationError(f"Name must be at most {NAME_MAX_LENGTH} characters.")
    return trimmed


def _validate_password_length(password: str, label: str) -> None:
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"{label} must be at least {PASSWORD_MIN_LENGTH} characters.")
    if len(password) > PASSWORD_MAX_LENGTH:
        raise ValidationError(f"{label} must be at most {PASSWORD_MAX_LENGTH} characters.")


def resolve_user(stores: Stores, session: Dict[str, Any]) -> Dict[str, Any]:
    """Return the user a session belongs to."""
    user = stores.users.get(session["userId"])
    if user is None:
        raise NotFoundError("User not found.")
    return user


def register(stores: Stores, name: Any, email: Any, password: Any) -> Dict[str, Any]:
    name = validate_name(name)
    email = _require_text(email, "Email must not be empty.").strip()
    password = _require_text(password, "Password must not be empty.")
    _validate_password_length(password, "Password")

    digest = hash_password(password)

    with stores.users.lock:
        if stores.users.find(lambda user: user["email"] == email) is not None:
            raise ConflictError("Email is already registered.")

        user = {
            "id": stores.ids.next(),
            "name": name,
            "email": email,
            "password": digest,
            "createdAt": stores.clock(),
        }
        stores.users.insert(user)

    _LOGGER.info("Registered user %s", user["id"])
    return public_user(user)


def login(stores: Stores, email: Any, password: Any) -> Tuple[str, Dict[str, Any]]:
    """Verify credentials and open a session.

    Unknown emails and wrong passwords produce the same failure.
    """
    if not isinstance(email, str) or not isinstance(password, str):
        raise AuthenticationError("Incorrect email or password.")

    user = stores.users.find(lambda candidate: candidate["email"] == email.strip())
    if user is None or not verify_password(password, user["password"]):
        raise AuthenticationError("Incorrect email or password.")

    token = stores.sessions.create(user["id"], user["email"])
    return token, public_user(user)


def get_profile(stores: Stores, session: Dict[str, Any]) -> Dict[str, Any]:
    return public_user(resolve_user(stores, session))


def update_profile(stores: Stores, session: Dict[str, Any], name: Any) -> Dict[str, Any]:
    user = resolve_user(stores, session)
    trimmed = validate_name(name)

    try:
        updated = stores.users.update(user["id"], {"name": trimmed})
    except RecordNotFoundError:
        raise NotFoundError("User not found.") from None
    return public_user(updated)


def change_password(
    stores: Stores,
    session: Dict[str, Any],
    current_password: Any,
    new_password: Any,
) -> Dict[str, Any]:
    """Replace the caller's password digest after checking the current one."""
    user = resolve_user(stores, session)
    current_password = _require_text(current_password, "Current password is required.")
    new_password = _require_text(new_password, "New password is required.")
    _validate_password_length(new_password, "New password")

    with stores.users.lock:
        user = resolve_user(stores, session)
        if not verify_password(current_password, user["password"]):
            raise ValidationError("Current password is incorrect.")
        if verify_password(new_password, user["password"]):
            raise ValidationError("New password must differ from the current password.")

        try:
            updated = stores.users.update(user["id"], {"password": hash_password(new_password)})
        except RecordNotFoundError:
            raise NotFoundError("User not found.") from None

    return {"updatedAt": updated["updatedAt"]}


def logout(stores: Stores, token: Optional[str]) -> None:
    stores.sessions.destroy(token)
