"""Path queries over parsed JSON and the predicates built on them."""

from loadcheck.query.evaluator import evaluate, traverse_object
from loadcheck.query.predicates import (
    is_equal,
    is_equal_with,
    is_every_item_contain,
    is_every_item_different,
    is_exists,
    is_ordered,
    is_total_data_in_range,
)
from loadcheck.query.tokenizer import Flatten, FlattenKey, Key, tokenize

__all__ = [
    "Flatten",
    "FlattenKey",
    "Key",
    "evaluate",
    "is_equal",
    "is_equal_with",
    "is_every_item_contain",
    "is_every_item_different",
    "is_exists",
    "is_ordered",
    "is_total_data_in_range",
    "tokenize",
    "traverse_object",
]
