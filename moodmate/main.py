"""Flask application setup and blueprint wiring."""

from __future__ import annotations

from typing import Any, Dict, Optional

from flask import Flask
from flask_cors import CORS

from moodmate.config import load_config
from moodmate.errors import register_error_handlers
from moodmate.extensions import bcrypt
from moodmate.routes import register_routes
from moodmate.storage import Stores
from moodmate.utils.auth import SESSION_HEADER


def create_app(config: Optional[Dict[str, Any]] = None, stores: Optional[Stores] = None) -> Flask:
    """Configure and return the Flask application instance.

    Loads both collections from ``DATA_DIR`` unless ``stores`` is supplied.
    Raises ``StorageError`` if a backing file cannot be read.
    """
    app = Flask(__name__)
    app.config.from_mapping(load_config())
    if config:
        app.config.update(config)

    CORS(
        app,
        resources={r"/api/*": {"origins": "*"}},
        allow_headers=["Accept", "Content-Type", "If-None-Match", SESSION_HEADER],
        expose_headers=[SESSION_HEADER],
        max_age=60,
    )

    bcrypt.init_app(app)

    if stores is None:
        stores = Stores(app.config["DATA_DIR"]).load()
    app.extensions["moodmate"] = stores

    register_error_handlers(app)
    register_routes(app)

    return app
