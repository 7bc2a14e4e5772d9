"""
Tokenizer for the path-query mini-language.

Grammar::

    Query   := Segment ("." Segment)*
    Segment := Key | Key "[]" | "[]"        ("[]" alone only as the first segment)

Examples: ``data.user.name``, ``items[].id``, ``[].tags[]``.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Union

from loadcheck.errors import QuerySyntaxError

FLATTEN_SUFFIX = "[]"


@dataclass(frozen=True)
class Key:
    """Look up ``name`` on each object."""

    name: str


@dataclass(frozen=True)
class FlattenKey:
    """Look up ``name`` on each object and splice the array found there."""

    name: str


@dataclass(frozen=True)
class Flatten:
    """Splice the current value, which must be an array."""


Token = Union[Key, FlattenKey, Flatten]


@lru_cache(maxsize=1024)
def tokenize(query: str) -> tuple[Token, ...]:
    """
    Split *query* into tokens.

    Raises:
        QuerySyntaxError: On empty segments, stray brackets, or ``[]``
            anywhere but the first segment.
    """
    if not isinstance(query, str):
        raise QuerySyntaxError("Query must be a string", repr(query))
    if query == "":
        raise QuerySyntaxError("Empty query", query)

    tokens: list[Token] = []
    for position, segment in enumerate(query.split(".")):
        if segment == "":
            raise QuerySyntaxError(f"Empty segment at position {position}", query)
        if segment == FLATTEN_SUFFIX:
            if position != 0:
                raise QuerySyntaxError("Bare [] is only allowed as the first segment", query)
            tokens.append(Flatten())
            continue

        flatten = segment.endswith(FLATTEN_SUFFIX)
        name = segment[: -len(FLATTEN_SUFFIX)] if flatten else segment
        if "[" in name or "]" in name:
            raise QuerySyntaxError(f"Unexpected bracket in segment {segment!r}", query)
        tokens.append(FlattenKey(name) if flatten else Key(name))
    return tuple(tokens)
