"""Hello service: the application Conveyor builds and deploys."""

from hello_service.app import GREETING, create_app

__all__ = [
    "GREETING",
    "create_app",
]
