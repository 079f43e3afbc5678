"""/api/journal routes for the caller's mood journal."""

from __future__ import annotations

from typing import Any, Dict

from flask import Blueprint, jsonify, request

from moodmate.services import journal_service
from moodmate.utils.auth import current_stores, require_session

bp = Blueprint("journal", __name__, url_prefix="/api/journal")


def _payload() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


@bp.post("")
def create_entry():
    session, error_response = require_session()
    if error_response is not None:
        return error_response

    payload = _payload()
    entry = journal_service.create_entry(
        current_stores(),
        session,
        payload.get("catatan"),
        payload.get("mood"),
        payload.get("aktivitas"),
        payload.get("detailAktivitas"),
    )
    return jsonify(success=True, message="Journal entry created.", data=entry), 200


@bp.get("")
def list_entries():
    """Return every entry of the current user, most recent first."""
    session, error_response = require_session()
    if error_response is not None:
        return error_response

    entries = journal_service.list_entries(current_stores(), session)
    return (
        jsonify(success=True, message="Journal entries retrieved.", data=entries, total=len(entries)),
        200,
    )


@bp.get("/<entry_id>")
def get_entry(entry_id: str):
    session, error_response = require_session()
    if error_response is not None:
        return error_response

    entry = journal_service.get_entry(current_stores(), session, entry_id)
    return jsonify(success=True, data=entry), 200


@bp.put("/<entry_id>")
def update_entry(entry_id: str):
    session, error_response = require_session()
    if error_response is not None:
        return error_response

    entry = journal_service.update_entry(current_stores(), session, entry_id, _payload())
    return jsonify(success=True, message="Journal entry updated.", data=entry), 200


@bp.delete("/<entry_id>")
def delete_entry(entry_id: str):
    session, error_response = require_session()
    if error_response is not None:
        return error_response

    entry = journal_service.delete_entry(current_stores(), session, entry_id)
    return jsonify(success=True, message="Journal entry deleted.", data=entry), 200
