"""Client for the external mood prediction service."""

from __future__ import annotations

import logging
from typing import Any, Dict

import requests

from moodmate.errors import UpstreamError

_LOGGER = logging.getLogger(__name__)

DEFAULT_PREDICT_URL = "http://127.0.0.1:8000/predict"


def _error_detail(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"
    if isinstance(body, dict) and body.get("detail"):
        return str(body["detail"])
    return f"HTTP {resp.status_code}"


def predict_mood(text: str, api_url: str = DEFAULT_PREDICT_URL, timeout: float = 10.0) -> Dict[str, Any]:
    """
    Ask the prediction service for the mood expressed in ``text``.

    Args:
        text: Free text to classify
        api_url: Endpoint accepting ``{"text": ...}``
        timeout: Seconds to wait for the service

    Returns:
        The service's JSON body, unchanged

    Raises:
        UpstreamError: On transport failure, a non-2xx status or a non-JSON body
    """
    try:
        resp = requests.post(api_url, json={"text": text}, timeout=timeout)
    except requests.exceptions.RequestException as exc:
        _LOGGER.warning("Prediction service unreachable at %s: %s", api_url, exc)
        raise UpstreamError(f"Prediction failed: {exc}") from exc

    _LOGGER.debug("Prediction service responded with %s", resp.status_code)

    if not resp.ok:
        detail = _error_detail(resp)
        _LOGGER.warning("Prediction service error %s: %s", resp.status_code, detail)
        raise UpstreamError(f"Prediction failed: {detail}")

    try:
        return resp.json()
    except ValueError as exc:
        raise UpstreamError("Prediction failed: service returned invalid JSON") from exc
