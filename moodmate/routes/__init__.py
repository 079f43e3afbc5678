"""Blueprint registration helper."""

from __future__ import annotations

from flask import Flask, jsonify

from moodmate.utils.auth import current_stores, now_iso

from .auth import bp as auth_bp
from .journal import bp as journal_bp
from .predict import bp as predict_bp


def register_routes(app: Flask) -> None:
    """Register all application blueprints on the provided Flask app."""
    app.register_blueprint(auth_bp)
    app.register_blueprint(journal_bp)
    app.register_blueprint(predict_bp)

    @app.get("/api/health")
    def health():
        stores = current_stores()
        return (
            jsonify(
                status="OK",
                message="MoodMate API is running",
                timestamp=now_iso(),
                stats={
                    "users": len(stores.users),
                    "journals": len(stores.journals),
                    "sessions": stores.sessions.count(),
                },
            ),
            200,
        )
