"""
Shared pytest fixtures for the loadcheck test suite.

Key Concepts Demonstrated:
- Factory fixtures that compile schemas from plain dicts
- Fixture files on disk for loader tests
- Faker for realistic generated values
- Fake HTTP responses for the check harness
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest
from faker import Faker

from loadcheck.config import TestingConfig
from loadcheck.schema import CompiledSchema, compile_schema

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"

fake = Faker()


# -----------------------------------------------------------------------------
# Schema Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def make_schema() -> Callable[[dict[str, Any]], CompiledSchema]:
    """
    Factory fixture compiling a schema written as a Python dict.

    Example:
        def test_something(make_schema):
            schema = make_schema({"type": "string"})
            assert schema.validate("x").valid
    """

    def _make_schema(document: dict[str, Any]) -> CompiledSchema:
        return compile_schema(json.dumps(document), TestingConfig)

    return _make_schema


@pytest.fixture
def schemas_dir() -> Path:
    """Directory holding schema fixture files."""
    return FIXTURES_DIR / "schemas"


@pytest.fixture
def user_schema(schemas_dir) -> CompiledSchema:
    """The user response schema, compiled from its JSON fixture file."""
    text = (schemas_dir / "user.schema.json").read_text(encoding="utf-8")
    return compile_schema(text, TestingConfig)


@pytest.fixture
def valid_user() -> dict[str, Any]:
    """A user payload satisfying ``user.schema.json``."""
    return {
        "email": fake.email(),
        "name": fake.name()[:30],
        "userImageUri": "https://example.com/avatar.png",
        "role": "user",
        "tags": ["alpha", "beta"],
        "createdAt": "2024-05-01T10:00:00Z",
    }


# -----------------------------------------------------------------------------
# Response Fixtures
# -----------------------------------------------------------------------------

class FakeResponse:
    """
    Minimal stand-in for a ``requests``/Locust response.

    Records ``success()``/``failure()`` calls the way Locust's
    ``catch_response`` context manager exposes them.
    """

    def __init__(self, body: Any = None, status_code: int = 200, text: str | None = None):
        self.status_code = status_code
        self.url = "http://localhost:8080/v1/user"
        if text is not None:
            self.text = text
        elif body is None:
            self.text = ""
        else:
            self.text = json.dumps(body)
        self.failures: list[str] = []
        self.succeeded = False
        self.json_calls = 0

    def json(self) -> Any:
        self.json_calls += 1
        return json.loads(self.text)

    def success(self) -> None:
        self.succeeded = True

    def failure(self, message: str) -> None:
        self.failures.append(message)


@pytest.fixture
def response_factory() -> Callable[..., FakeResponse]:
    """Factory fixture building :class:`FakeResponse` objects."""
    return FakeResponse
