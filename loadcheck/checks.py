"""
Named response checks for load-test scenarios.

A scenario describes what a good response looks like as a mapping of
human-readable names to conditions::

    conditions = {
        "should return 200": lambda body, res: res.status_code == 200,
        "should have an id": lambda body, res: is_exists(body, "data.id", ["string"]),
    }

:func:`get_assert_checks` parses the body once and wraps every condition
into a zero-argument callable named ``"<feature> | <check>"``.  A condition
that raises counts as failed; it never propagates into the virtual user.

Key Concepts Demonstrated:
- Parse-once response handling shared by many checks
- Failure isolation per check
- Debug logging of the full exchange, switched by configuration
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Mapping

from loadcheck.config import Config, get_config

logger = logging.getLogger(__name__)

Condition = Callable[[Any, Any], bool]
Check = Callable[[], bool]


def safe_json(response: Any) -> tuple[Any, str | None]:
    """
    Parse a response body as JSON without raising.

    Args:
        response: A ``requests``/Locust response object.

    Returns:
        ``(parsed, error)``: the parsed body (``None`` for an empty or
        unparsable body) and the parse error message, if any.
    """
    body = getattr(response, "text", None)
    if not body:
        return None, None
    try:
        return response.json(), None
    except ValueError as exc:
        return None, str(exc)


def _format_payload(payload: Any) -> str:
    if isinstance(payload, (dict, list)):
        return json.dumps(payload, default=repr)
    return str(payload)


def get_assert_checks(
    response: Any,
    method: str,
    payload: Any,
    headers: Mapping[str, str],
    feature_name: str,
    conditions: Mapping[str, Condition],
    config_class: type[Config] | None = None,
    *,
    parsed: tuple[Any, str | None] | None = None,
) -> dict[str, Check]:
    """
    Build named checks for one HTTP exchange.

    Args:
        response: The HTTP response under test.
        method: HTTP method used, for debug output.
        payload: Request body or query params sent, for debug output.
        headers: Request headers sent, for debug output.
        feature_name: Scenario step name, used as the check-name prefix.
        conditions: Check name to ``condition(parsed_json, response)``.
        config_class: Configuration; ``DEBUG`` enables verbose logging.
        parsed: A ``safe_json(response)`` result the caller already holds;
            the body is parsed here when omitted.

    Returns:
        Mapping of ``"<feature> | <check>"`` to a zero-argument callable
        returning the check result.
    """
    config_class = config_class or get_config()
    debug = config_class.DEBUG
    parsed_json, parse_error = parsed if parsed is not None else safe_json(response)
    if parse_error and debug:
        logger.warning("%s | JSON parsing failed: %s", feature_name, parse_error)

    checks: dict[str, Check] = {}
    for check_name, condition in conditions.items():
        test_name = f"{feature_name} | {check_name}"
        checks[test_name] = _make_check(test_name, condition, parsed_json, response, parse_error, debug)

    if debug:
        logger.info("%s | request path: %s %s", feature_name, method, getattr(response, "url", ""))
        logger.info("%s | request header: %s", feature_name, json.dumps(dict(headers)))
        logger.info("%s | request payload: %s", feature_name, _format_payload(payload))
        logger.info("%s | response code: %s", feature_name, getattr(response, "status_code", None))
        logger.info("%s | response body (raw): %s", feature_name, getattr(response, "text", ""))
        if parse_error:
            logger.info("%s | response body (parsed): ERROR - %s", feature_name, parse_error)
        elif parsed_json is not None:
            logger.info("%s | response body (parsed): successfully parsed", feature_name)
        else:
            logger.info("%s | response body (parsed): no body or body not JSON", feature_name)

    return checks


def _make_check(
    test_name: str,
    condition: Condition,
    parsed_json: Any,
    response: Any,
    parse_error: str | None,
    debug: bool,
) -> Check:
    def run() -> bool:
        try:
            result = bool(condition(parsed_json, response))
        except Exception as exc:
            if debug:
                logger.error("%s | Error during check execution: %s", test_name, exc)
            return False
        if debug:
            logger.info("%s | assert result: %s", test_name, result)
            if not result and parse_error:
                logger.info("%s | Note: JSON parsing failed earlier (%s)", test_name, parse_error)
        return result

    return run


def run_checks(checks: Mapping[str, Check]) -> list[str]:
    """Evaluate every check and return the names of those that failed."""
    return [name for name, check in checks.items() if not check()]
