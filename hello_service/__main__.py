"""Run the hello service: ``python -m hello_service``.

This serves through Flask's built-in development server, which handles
the single demo endpoint well enough. For real traffic, mount
``hello_service.create_app()`` in a WSGI server such as gunicorn instead.
"""

from __future__ import annotations

import logging
import os

from hello_service.app import DEFAULT_PORT, create_app


def main() -> None:
    """Serve on 0.0.0.0:$PORT (default 8080)."""

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    port = int(os.environ.get("PORT", DEFAULT_PORT))
    logging.getLogger(__name__).info(f"Listening on port {port}")
    create_app().run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
