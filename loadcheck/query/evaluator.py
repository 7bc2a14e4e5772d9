"""
Evaluation of path queries against parsed JSON.

The evaluator keeps a working set of values, starting with the root, and
maps every value through each token in turn.  Paths that do not exist, or
that run into the wrong kind of value, simply contribute nothing: the result
is an empty list rather than an error.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from loadcheck.errors import QuerySyntaxError
from loadcheck.query.tokenizer import Flatten, FlattenKey, Key, Token, tokenize

logger = logging.getLogger(__name__)

_ABSENT = object()


def _step(value: Any, token: Token) -> list[Any]:
    if isinstance(token, Flatten):
        return list(value) if isinstance(value, list) else []

    if not isinstance(value, dict):
        return []
    found = value.get(token.name, _ABSENT)
    if found is _ABSENT:
        return []
    if isinstance(token, FlattenKey):
        return list(found) if isinstance(found, list) else []
    return [found]


def evaluate(value: Any, tokens: Iterable[Token]) -> list[Any]:
    """Apply *tokens* to *value* and return every matched value, in order."""
    working_set = [value]
    for token in tokens:
        if not working_set:
            break
        working_set = [found for current in working_set for found in _step(current, token)]
    return working_set


def traverse_object(value: Any, query: str) -> list[Any]:
    """
    Return the values addressed by *query* inside *value*.

    Args:
        value: Parsed JSON.  ``None`` yields an empty result.
        query: A dot/``[]`` path such as ``"data.items[].id"``.

    Returns:
        Matched values in document order, duplicates included.  Missing
        paths and malformed queries give ``[]``.

    Example:
        >>> traverse_object({"a": {"b": [{"c": 1}, {"c": 2}]}}, "a.b[].c")
        [1, 2]
    """
    if value is None:
        return []
    try:
        tokens = tokenize(query)
    except (QuerySyntaxError, TypeError) as exc:
        logger.debug("Ignoring malformed query: %s", exc)
        return []
    return evaluate(value, tokens)
