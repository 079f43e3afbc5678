"""Development entrypoint delegating to the application package."""

import logging
import os
import signal
import sys

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from moodmate.main import create_app  # noqa: E402
from moodmate.storage import StorageError  # noqa: E402

_LOGGER = logging.getLogger("moodmate")


def _log_routes(app) -> None:
    for rule in sorted(app.url_map.iter_rules(), key=lambda r: r.rule):
        if rule.endpoint == "static":
            continue
        methods = ",".join(sorted(rule.methods - {"HEAD", "OPTIONS"}))
        _LOGGER.info("   - %s %s", methods, rule.rule)


def _raise_interrupt(signum, frame):
    raise KeyboardInterrupt


def main() -> int:
    logging.basicConfig(
        level=os.getenv("MOODMATE_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        app = create_app()
    except StorageError:
        _LOGGER.exception("Refusing to start with unreadable data files")
        return 1

    stores = app.extensions["moodmate"]
    signal.signal(signal.SIGTERM, _raise_interrupt)

    _LOGGER.info("Server running on http://%s:%s", app.config["HOST"], app.config["PORT"])
    _log_routes(app)

    try:
        app.run(host=app.config["HOST"], port=app.config["PORT"], threaded=True)
    except KeyboardInterrupt:
        pass

    _LOGGER.info("Graceful shutdown initiated...")
    try:
        stores.flush()
    except StorageError:
        _LOGGER.exception("Error during shutdown")
        return 1
    _LOGGER.info("All data saved successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
