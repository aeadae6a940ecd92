"""Serve the inventory API: Flask's reloader in development, Waitress otherwise."""

import logging
import os

from paste.translogger import TransLogger  # type: ignore[import-untyped]
from waitress import serve

from app import create_app
from app.config import Settings, get_settings


def _waitress_threads(settings: Settings) -> int:
    # One worker per pooled connection keeps requests from queueing on the pool
    default = settings.DB_POOL_SIZE + settings.DB_POOL_MAX_OVERFLOW
    return int(os.getenv("WAITRESS_THREADS", default))


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    settings = get_settings()
    app = create_app(settings)
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", 5000))

    if settings.FLASK_ENV in ("development", "testing"):
        app.logger.info("Starting Flask development server on %s:%s", host, port)
        app.run(host=host, port=port, debug=True)
        return

    threads = _waitress_threads(settings)
    wsgi = TransLogger(app, setup_console_handler=False)
    wsgi.logger.info("Starting Waitress on %s:%s with %d threads", host, port, threads)
    serve(wsgi, host=host, port=port, threads=threads)


if __name__ == "__main__":
    main()
