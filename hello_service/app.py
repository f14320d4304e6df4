"""Flask entrypoint for the hello service."""

from __future__ import annotations

import logging

from flask import Flask, Response

GREETING = "Hello, DevOps World from Java!"
DEFAULT_PORT = 8080

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    """Create the Flask application.

    Only ``GET /hello`` is routed; everything else gets Flask's default
    404/405 responses.
    """

    app = Flask(__name__)

    @app.route("/hello", methods=["GET"])
    def hello() -> Response:
        logger.debug("Serving greeting")
        return Response(GREETING, status=200, mimetype="text/plain")

    return app
