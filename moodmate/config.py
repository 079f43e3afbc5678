"""Environment-driven configuration defaults."""

from __future__ import annotations

import os
from typing import Any, Dict

from moodmate.services.prediction_service import DEFAULT_PREDICT_URL


def load_config() -> Dict[str, Any]:
    """Read settings from the environment, falling back to development defaults."""
    return {
        "DATA_DIR": os.getenv("MOODMATE_DATA_DIR", os.path.join(os.getcwd(), "data")),
        "PREDICT_URL": os.getenv("MOODMATE_PREDICT_URL", DEFAULT_PREDICT_URL),
        "PREDICT_TIMEOUT_SECONDS": float(os.getenv("MOODMATE_PREDICT_TIMEOUT", "10")),
        "BCRYPT_LOG_ROUNDS": int(os.getenv("BCRYPT_LOG_ROUNDS", "10")),
        # bcrypt only reads 72 bytes; new passwords may be up to 100 characters.
        "BCRYPT_HANDLE_LONG_PASSWORDS": True,
        "HOST": os.getenv("MOODMATE_HOST", "localhost"),
        "PORT": int(os.getenv("MOODMATE_PORT", "9000")),
    }
