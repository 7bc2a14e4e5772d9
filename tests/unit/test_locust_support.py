"""
Unit tests for the Locust integration.

The Locust user is exercised without spawning a runner: ``checked_request``
is called on a stand-in object whose ``client`` mimics Locust's
``catch_response`` context manager.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from types import SimpleNamespace

import pytest

pytest.importorskip("locust")

from loadcheck import config as config_module  # noqa: E402
from loadcheck.config import TestingConfig  # noqa: E402
from loadcheck.locust_support import CheckedHttpUser, apply_checks  # noqa: E402

pytestmark = pytest.mark.unit


class VerboseConfig(TestingConfig):
    """Testing profile with check logging switched on."""

    DEBUG = True


class RecordingClient:
    """Stand-in for Locust's ``HttpSession`` that records each request."""

    def __init__(self, response):
        self.response = response
        self.calls = []

    @contextmanager
    def request(self, method, path, **kwargs):
        self.calls.append((method, path, kwargs))
        yield self.response


class TestApplyChecks:
    """Tests for ``apply_checks``."""

    def test_all_passing_marks_success(self, response_factory):
        response = response_factory({"data": {"id": 1}})

        failed = apply_checks(
            response, "GET", None, {}, "Get", {"ok": lambda body, res: True}, TestingConfig
        )

        assert failed == []
        assert response.succeeded
        assert response.failures == []

    def test_failures_are_listed_by_name(self, response_factory):
        """Test that the Locust failure message names every failed check."""
        # Arrange
        response = response_factory({"data": []}, status_code=500)
        conditions = {
            "should return 200": lambda body, res: res.status_code == 200,
            "should have data": lambda body, res: len(body["data"]) > 0,
            "should be JSON": lambda body, res: body is not None,
        }

        # Act
        failed = apply_checks(response, "GET", None, {}, "List", conditions, TestingConfig)

        # Assert
        assert failed == ["List | should return 200", "List | should have data"]
        assert response.failures == ["Failed checks: List | should return 200; List | should have data"]
        assert not response.succeeded


class TestCheckedHttpUser:
    """Tests for ``CheckedHttpUser``."""

    def test_is_abstract(self):
        assert CheckedHttpUser.abstract is True
        assert CheckedHttpUser.config_class is None

    def test_checked_request_sends_and_judges(self, response_factory):
        # Arrange
        response = response_factory({"data": {"token": "abc"}})
        client = RecordingClient(response)
        user = SimpleNamespace(client=client, headers={"Accept": "application/json"}, config_class=TestingConfig)

        # Act
        parsed = CheckedHttpUser.checked_request(
            user,
            "post",
            "/v1/auth/login",
            feature_name="Login",
            conditions={"has token": lambda body, res: body["data"]["token"] == "abc"},
            json={"email": "a@b.co"},
            headers={"X-Trace": "1"},
        )

        # Assert
        method, path, kwargs = client.calls[0]
        assert (method, path) == ("POST", "/v1/auth/login")
        assert kwargs["catch_response"] is True
        assert kwargs["name"] == "/v1/auth/login [POST]"
        assert kwargs["headers"] == {"Accept": "application/json", "X-Trace": "1"}
        assert kwargs["json"] == {"email": "a@b.co"}
        assert parsed == {"data": {"token": "abc"}}
        assert response.succeeded

    def test_explicit_name_is_kept(self, response_factory):
        client = RecordingClient(response_factory())
        user = SimpleNamespace(client=client, headers={}, config_class=TestingConfig)

        parsed = CheckedHttpUser.checked_request(
            user,
            "GET",
            "/v1/product/42",
            feature_name="Product",
            conditions={"empty body": lambda body, res: body is None},
            name="/v1/product/[id]",
        )

        assert client.calls[0][2]["name"] == "/v1/product/[id]"
        assert parsed is None
        assert client.response.succeeded

    def test_failed_check_marks_response(self, response_factory):
        response = response_factory({"data": []}, status_code=404)
        user = SimpleNamespace(client=RecordingClient(response), headers={}, config_class=TestingConfig)

        CheckedHttpUser.checked_request(
            user,
            "GET",
            "/v1/product",
            feature_name="Browse",
            conditions={"should return 200": lambda body, res: res.status_code == 200},
            params={"page": 1},
        )

        assert response.failures == ["Failed checks: Browse | should return 200"]

    def test_body_is_parsed_once(self, response_factory):
        """Test that conditions and the return value share one JSON parse."""
        # Arrange
        response = response_factory({"data": [{"id": 1}, {"id": 2}]})
        user = SimpleNamespace(client=RecordingClient(response), headers={}, config_class=TestingConfig)
        conditions = {
            "should return 200": lambda body, res: res.status_code == 200,
            "should list two": lambda body, res: len(body["data"]) == 2,
        }

        # Act
        parsed = CheckedHttpUser.checked_request(
            user, "GET", "/v1/product", feature_name="Browse", conditions=conditions
        )

        # Assert
        assert parsed == {"data": [{"id": 1}, {"id": 2}]}
        assert response.json_calls == 1
        assert response.succeeded

    def test_config_is_chosen_at_request_time(self, response_factory, monkeypatch, caplog):
        """Test that ``LOADCHECK_ENV`` set after import still selects the profile."""
        # Arrange
        monkeypatch.setitem(config_module.config, "verbose", VerboseConfig)
        monkeypatch.setenv("LOADCHECK_ENV", "verbose")
        user = SimpleNamespace(client=RecordingClient(response_factory({})), headers={}, config_class=None)

        # Act
        with caplog.at_level(logging.INFO, logger="loadcheck.checks"):
            CheckedHttpUser.checked_request(
                user, "GET", "/health", feature_name="Health", conditions={"ok": lambda body, res: True}
            )

        # Assert
        assert "Health | ok | assert result: True" in caplog.text
