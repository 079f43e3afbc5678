"""Error taxonomy and the Flask handlers that render it as JSON."""

from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from moodmate.storage import StorageError

_LOGGER = logging.getLogger(__name__)


class MoodMateError(Exception):
    """Base class for failures reported to API clients."""

    status_code = 500
    default_message = "Internal server error."

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MoodMateError):
    status_code = 400
    default_message = "Invalid request."


class ConflictError(MoodMateError):
    status_code = 400
    default_message = "Resource already exists."


class AuthenticationError(MoodMateError):
    status_code = 401
    default_message = "Invalid or missing session."


class NotFoundError(MoodMateError):
    status_code = 404
    default_message = "Not found."


class UpstreamError(MoodMateError):
    status_code = 500
    default_message = "Prediction failed."


class InternalError(MoodMateError):
    status_code = 500


def _error_response(message: str, status: int):
    return jsonify(success=False, message=message), status


def register_error_handlers(app: Flask) -> None:
    """Map every failure raised while handling a request to the JSON envelope."""

    @app.errorhandler(MoodMateError)
    def _handle_moodmate_error(exc: MoodMateError):
        return _error_response(exc.message, exc.status_code)

    @app.errorhandler(HTTPException)
    def _handle_http_error(exc: HTTPException):
        return _error_response(exc.description or exc.name, exc.code or 500)

    @app.errorhandler(StorageError)
    def _handle_storage_error(exc: StorageError):
        _LOGGER.error("Request failed because data could not be saved: %s", exc)
        return _error_response("Could not save changes.", 500)

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        app.logger.exception("Unexpected error while handling request")
        return _error_response(InternalError.default_message, 500)
