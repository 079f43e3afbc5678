"""Journal entry CRUD scoped to the entry owner."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from moodmate.errors import NotFoundError, ValidationError
from moodmate.services.auth_service import resolve_user
from moodmate.storage import Stores

ENTRY_NOT_FOUND = "Journal entry not found."


def _validate_activities(aktivitas: Any) -> List[str]:
    if not isinstance(aktivitas, list) or not all(isinstance(item, str) for item in aktivitas):
        raise ValidationError("Activities must be a list of strings.")
    return list(aktivitas)


def _validate_details(detail: Any) -> Dict[str, Any]:
    if not isinstance(detail, dict):
        raise ValidationError("Activity details must be an object.")
    return dict(detail)


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def _owned_entry(stores: Stores, user_id: str, entry_id: str) -> Optional[Dict[str, Any]]:
    # Entries owned by someone else look exactly like missing ones.
    return stores.journals.find(
        lambda entry: entry["id"] == entry_id and entry.get("userId") == user_id
    )


def create_entry(
    stores: Stores,
    session: Dict[str, Any],
    catatan: Any,
    mood: Any,
    aktivitas: Any = None,
    detail_aktivitas: Any = None,
) -> Dict[str, Any]:
    user = resolve_user(stores, session)

    if _is_blank(catatan):
        raise ValidationError("Note must not be empty.")
    if _is_blank(mood):
        raise ValidationError("Mood must not be empty.")
    activities = _validate_activities([] if aktivitas is None else aktivitas)
    details = _validate_details({} if detail_aktivitas is None else detail_aktivitas)

    entry = {
        "id": stores.ids.next(),
        "userId": user["id"],
        "catatan": catatan,
        "mood": mood,
        "aktivitas": activities,
        "detailAktivitas": details,
        "createdAt": stores.clock(),
    }
    return stores.journals.insert(entry)


def list_entries(stores: Stores, session: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Return the caller's entries, newest first."""
    user = resolve_user(stores, session)
    entries = [entry for entry in stores.journals.all() if entry.get("userId") == user["id"]]
    # sorted() is stable, so entries sharing a timestamp keep insertion order.
    return sorted(entries, key=lambda entry: entry["createdAt"], reverse=True)


def get_entry(stores: Stores, session: Dict[str, Any], entry_id: str) -> Dict[str, Any]:
    user = resolve_user(stores, session)
    entry = _owned_entry(stores, user["id"], entry_id)
    if entry is None:
        raise NotFoundError(ENTRY_NOT_FOUND)
    return entry


def update_entry(
    stores: Stores,
    session: Dict[str, Any],
    entry_id: str,
    payload: Dict[str, Any],
) -> Dict[str, Any]:
    """Apply the non-blank fields of ``payload`` to an owned entry.

    Blank ``catatan``/``mood`` values are ignored; non-string ones are rejected.
    """
    user = resolve_user(stores, session)

    patch: Dict[str, Any] = {}
    for field, label in (("catatan", "Note"), ("mood", "Mood")):
        value = payload.get(field)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ValidationError(f"{label} must be a string.")
        if value.strip():
            patch[field] = value
    if payload.get("aktivitas") is not None:
        patch["aktivitas"] = _validate_activities(payload["aktivitas"])
    if payload.get("detailAktivitas") is not None:
        patch["detailAktivitas"] = _validate_details(payload["detailAktivitas"])

    with stores.journals.lock:
        if _owned_entry(stores, user["id"], entry_id) is None:
            raise NotFoundError(ENTRY_NOT_FOUND)
        return stores.journals.update(entry_id, patch)


def delete_entry(stores: Stores, session: Dict[str, Any], entry_id: str) -> Dict[str, Any]:
    user = resolve_user(stores, session)

    with stores.journals.lock:
        if _owned_entry(stores, user["id"], entry_id) is None:
            raise NotFoundError(ENTRY_NOT_FOUND)
        return stores.journals.remove(entry_id)
