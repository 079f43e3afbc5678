"""Service layer modules for the MoodMate API."""

from . import auth_service, journal_service, prediction_service

__all__ = [
    "auth_service",
    "journal_service",
    "prediction_service",
]
