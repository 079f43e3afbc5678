"""Authentication helpers for session tokens, timestamps and password digests."""

from __future__ import annotations

import secrets
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

import bcrypt as bcrypt_lib
from flask import current_app, jsonify, request

from moodmate.extensions import bcrypt

SESSION_HEADER = "X-Session-ID"

BCRYPT_MAX_BYTES = 72


def now_millis() -> int:
    """Return the current UNIX timestamp in milliseconds."""
    return int(time.time() * 1000)


def now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string with millisecond precision."""
    stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def generate_token(prefix: str = "session") -> str:
    """Return an unguessable opaque token with a timestamp component."""
    return f"{prefix}_{now_millis()}_{secrets.token_urlsafe(24)}"


def hash_password(password: str) -> str:
    return bcrypt.generate_password_hash(password).decode("utf-8")


def verify_password(password: str, digest: str) -> bool:
    """Check a plaintext password against a stored bcrypt digest.

    Digests hashed from the raw password (without the SHA-256 prehash used
    for new digests) are accepted too.
    """
    try:
        if bcrypt.check_password_hash(digest, password):
            return True
        # bcrypt only reads the first 72 bytes of the raw password.
        raw = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        return bcrypt_lib.checkpw(raw, digest.encode("utf-8"))
    except ValueError:
        current_app.logger.warning("Stored password digest is not a valid bcrypt hash")
        return False


def current_stores():
    """Return the stores attached to the running application."""
    return current_app.extensions["moodmate"]


def session_token() -> Optional[str]:
    token = request.headers.get(SESSION_HEADER, "").strip()
    return token or None


def require_session() -> Tuple[Optional[Dict[str, Any]], Optional[Any]]:
    """Resolve the ``X-Session-ID`` header and return the associated session."""
    session = current_stores().sessions.lookup(session_token())
    if session is None:
        return None, (jsonify(success=False, message="Invalid or missing session."), 401)

    return session, None
