"""
Locust integration for named response checks.

:class:`CheckedHttpUser` is an abstract Locust user whose requests are
judged by loadcheck conditions instead of by status code alone.  Concrete
scenarios subclass it and call :meth:`CheckedHttpUser.checked_request` from
their ``@task`` methods::

    class ProductBrowser(CheckedHttpUser):
        product_list = load_schema("schemas/product_list.schema.json")

        @task
        def browse(self):
            self.checked_request(
                "GET",
                "/v1/product",
                feature_name="Browse products",
                conditions={
                    "should return 200": lambda body, res: res.status_code == 200,
                    "should match schema": lambda body, res: self.product_list.is_valid(body),
                    "should be sorted": lambda body, res: is_ordered(body, "data[].price", "asc"),
                },
            )

Key Concepts Demonstrated:
- Abstract Locust base classes for DRY scenario authoring
- ``catch_response=True`` so check failures show up in Locust statistics
- Failing check names reported verbatim for quick diagnosis
"""

from __future__ import annotations

from typing import Any, Mapping

from locust import HttpUser

from loadcheck.checks import Condition, get_assert_checks, run_checks, safe_json
from loadcheck.config import Config, get_config


def apply_checks(
    response: Any,
    method: str,
    payload: Any,
    headers: Mapping[str, str],
    feature_name: str,
    conditions: Mapping[str, Condition],
    config_class: type[Config] | None = None,
    *,
    parsed: tuple[Any, str | None] | None = None,
) -> list[str]:
    """
    Run conditions against a ``catch_response`` response and mark it.

    Calls ``response.failure(...)`` listing the failed check names, or
    ``response.success()`` when every check passed.  *parsed* is an
    optional ``safe_json(response)`` result, reused instead of parsing the
    body again.

    Returns:
        The names of the failed checks.
    """
    checks = get_assert_checks(
        response,
        method,
        payload,
        headers,
        feature_name,
        conditions,
        config_class,
        parsed=parsed,
    )
    failed = run_checks(checks)
    if failed:
        response.failure("Failed checks: " + "; ".join(failed))
    else:
        response.success()
    return failed


class CheckedHttpUser(HttpUser):
    """
    Base user whose requests are validated by named conditions.

    ``abstract = True`` tells Locust not to spawn this class directly.

    Attributes:
        config_class: Configuration used for check logging.  ``None`` picks
            the profile named by ``LOADCHECK_ENV`` at request time.
        headers: Default headers merged into every request.
    """

    abstract = True

    config_class: type[Config] | None = None
    headers: dict[str, str] = {}

    def checked_request(
        self,
        method: str,
        path: str,
        *,
        feature_name: str,
        conditions: Mapping[str, Condition],
        **kwargs: Any,
    ) -> Any:
        """
        Send a request, apply *conditions*, and return the parsed body.

        Extra keyword arguments go straight to Locust's client (``json``,
        ``params``, ``name`` ...).  Returns ``None`` when the body is empty
        or not JSON.
        """
        headers = {**self.headers, **kwargs.pop("headers", {})}
        payload = kwargs.get("json", kwargs.get("params"))
        kwargs.setdefault("name", f"{path} [{method.upper()}]")

        with self.client.request(
            method.upper(),
            path,
            headers=headers,
            catch_response=True,
            **kwargs,
        ) as response:
            parsed = safe_json(response)
            apply_checks(
                response,
                method.upper(),
                payload,
                headers,
                feature_name,
                conditions,
                self.config_class or get_config(),
                parsed=parsed,
            )
            return parsed[0]
