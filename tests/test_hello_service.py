from __future__ import annotations

import pytest
from flask import Flask

import hello_service.__main__ as entrypoint
from hello_service import GREETING, create_app


@pytest.fixture
def client():
    app = create_app()
    app.config.update(TESTING=True)
    return app.test_client()


def test_hello_returns_exact_greeting(client) -> None:
    response = client.get("/hello")

    assert response.status_code == 200
    assert response.get_data(as_text=True) == "Hello, DevOps World from Java!"
    assert response.mimetype == "text/plain"


def test_greeting_constant_has_no_trailing_content() -> None:
    assert GREETING == GREETING.strip()


def test_unknown_path_is_not_found(client) -> None:
    assert client.get("/").status_code == 404


def test_other_methods_are_not_allowed(client) -> None:
    assert client.post("/hello").status_code == 405


def test_main_serves_on_all_interfaces(monkeypatch) -> None:
    served = []
    monkeypatch.setattr(Flask, "run", lambda self, **kwargs: served.append(kwargs))
    monkeypatch.setenv("PORT", "9090")

    entrypoint.main()

    assert served == [{"host": "0.0.0.0", "port": 9090}]
    assert "WSGI server" in entrypoint.__doc__
