"""
Boolean assertions over parsed JSON, built on :func:`traverse_object`.

These predicates are the vocabulary of response checks::

    checks = {
        "has a token": lambda body, _res: is_exists(body, "data.token", ["string"]),
        "sorted by price": lambda body, _res: is_ordered(body, "data[].price", "asc"),
    }

They run for every response of a load test, so none of them raises.  An
unexpected response shape turns into a conservative ``False`` (or ``True``
where documented) instead of aborting the virtual user.

Key Concepts Demonstrated:
- Declarative checks composed from small, total functions
- "Absence counts as null" semantics for optional fields
- One decorator owning the never-raise policy
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Literal, Sequence, TypeVar

from loadcheck.jsonvalues import is_number, json_equal, json_type
from loadcheck.query.evaluator import traverse_object

logger = logging.getLogger(__name__)

Direction = Literal["asc", "desc"]
F = TypeVar("F", bound=Callable[..., bool])


def _never_raises(default: bool) -> Callable[[F], F]:
    """Return *default* (and log) if the wrapped predicate raises."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> bool:
            try:
                return func(*args, **kwargs)
            except Exception as exc:
                logger.debug("%s failed, returning %s: %r", func.__name__, default, exc)
                return default

        return wrapper  # type: ignore[return-value]

    return decorator


def _normalise_type_names(expected_types: Sequence[str | None]) -> set[str]:
    return {"null" if name is None else name for name in expected_types}


def _has_allowed_type(value: Any, allowed: set[str]) -> bool:
    # Arrays also satisfy "object".
    if isinstance(value, list):
        return "array" in allowed or "object" in allowed
    return json_type(value) in allowed


@_never_raises(False)
def is_exists(parsed_json: Any, query: str, expected_types: Sequence[str | None]) -> bool:
    """
    Check that every value at *query* has one of *expected_types*.

    Type names are ``string``, ``number``, ``boolean``, ``object``,
    ``array`` and ``null`` (``None`` is accepted for ``null``).  Finding
    nothing counts as finding ``null``, so an optional field can be asserted
    with ``["string", "null"]``.  An array also satisfies ``"object"``.
    """
    allowed = _normalise_type_names(expected_types)
    matches = traverse_object(parsed_json, query)
    if not matches:
        return "null" in allowed
    return all(_has_allowed_type(match, allowed) for match in matches)


@_never_raises(False)
def is_equal(parsed_json: Any, query: str, expected: Any) -> bool:
    """Check that *expected* is among the values at *query*."""
    if parsed_json is None:
        return expected is None
    return any(json_equal(match, expected) for match in traverse_object(parsed_json, query))


@_never_raises(False)
def is_equal_with(
    parsed_json: Any,
    query: str,
    callback: Callable[[list[Any]], bool],
) -> bool:
    """Hand every value at *query* to *callback* and return its verdict."""
    return bool(callback(traverse_object(parsed_json, query)))


def _comparable_kind(value: Any) -> str | None:
    if isinstance(value, str):
        return "string"
    if is_number(value):
        return "number"
    return None


@_never_raises(False)
def is_ordered(
    parsed_json: Any,
    query: str,
    ordered: Direction,
    conversion: Callable[[Any], Any] | None = None,
) -> bool:
    """
    Check that the values at *query* are sorted in *ordered* direction.

    Values pass through *conversion* first (e.g. ``parse_datetime``).
    Neighbours must both be strings or both be numbers; anything else fails
    the check.  Fewer than two values are trivially ordered.
    """
    if ordered not in ("asc", "desc"):
        logger.warning("is_ordered: unknown direction %r for query %r", ordered, query)
        return False

    convert = conversion or (lambda item: item)
    values = [convert(match) for match in traverse_object(parsed_json, query)]

    for index in range(1, len(values)):
        previous, current = values[index - 1], values[index]
        previous_kind = _comparable_kind(previous)
        if previous_kind is None or previous_kind != _comparable_kind(current):
            logger.warning(
                "is_ordered: incomparable types at index %d (%s) and %d (%s) for query %r",
                index - 1,
                json_type(previous),
                index,
                json_type(current),
                query,
            )
            return False
        if ordered == "asc" and current < previous:
            return False
        if ordered == "desc" and current > previous:
            return False
    return True


@_never_raises(False)
def is_every_item_contain(parsed_json: Any, query: str, search: str) -> bool:
    """Check that every value at *query* is a string containing *search*, ignoring case."""
    matches = traverse_object(parsed_json, query)
    if not matches:
        return False
    needle = search.lower()
    return all(isinstance(match, str) and needle in match.lower() for match in matches)


def _is_scalar(value: Any) -> bool:
    return json_type(value) in ("string", "number", "boolean")


@_never_raises(False)
def is_every_item_different(parsed_json: Any, comparator_json: Any, query: str) -> bool:
    """
    Check that no value at *query* in one document appears in the other.

    Used to assert that two pages of a listing do not overlap.  Only
    strings, numbers and booleans are compared; objects, arrays, nulls, or a
    pair of differently-typed values make the check fail, as does an empty
    side.
    """
    if parsed_json is None or comparator_json is None:
        return False
    values = traverse_object(parsed_json, query)
    comparators = traverse_object(comparator_json, query)
    if not values or not comparators:
        return False

    for value in values:
        if not _is_scalar(value):
            return False
        for comparator in comparators:
            if not _is_scalar(comparator) or json_type(value) != json_type(comparator):
                return False
            if value == comparator:
                return False
    return True


@_never_raises(False)
def is_total_data_in_range(parsed_json: Any, query: str, minimum: int, maximum: int) -> bool:
    """Check that the number of values at *query* lies within ``[minimum, maximum]``."""
    return minimum <= len(traverse_object(parsed_json, query)) <= maximum


__all__ = [
    "is_equal",
    "is_equal_with",
    "is_every_item_contain",
    "is_every_item_different",
    "is_exists",
    "is_ordered",
    "is_total_data_in_range",
    "traverse_object",
]
