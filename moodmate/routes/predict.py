"""/api/predict-mood endpoint proxying to the prediction service."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from moodmate.errors import ValidationError
from moodmate.services import prediction_service
from moodmate.utils.auth import require_session

bp = Blueprint("predict", __name__, url_prefix="/api")


@bp.post("/predict-mood")
def predict_mood():
    """Forward the submitted text and return the service's prediction as-is."""
    session, error_response = require_session()
    if error_response is not None:
        return error_response

    payload = request.get_json(silent=True) or {}
    text = payload.get("text") if isinstance(payload, dict) else None
    if not isinstance(text, str) or not text.strip():
        raise ValidationError("Text must not be empty.")

    current_app.logger.info("Prediction requested by user %s", session["userId"])
    result = prediction_service.predict_mood(
        text,
        api_url=current_app.config["PREDICT_URL"],
        timeout=current_app.config["PREDICT_TIMEOUT_SECONDS"],
    )
    return jsonify(result), 200
