"""
loadcheck: response assertions for functional and load tests of HTTP APIs.

The package has two halves that every check in a scenario relies on:

* :mod:`loadcheck.schema` -- compile a JSON Schema once, validate many
  response bodies against it, and get every violation back.
* :mod:`loadcheck.query` -- address values inside a response with a small
  dot/``[]`` path language and assert on them with total predicates.

:mod:`loadcheck.checks` and :mod:`loadcheck.locust_support` wire both into
named checks for Locust scenarios.
"""

import logging

from loadcheck.errors import (
    LoadcheckError,
    QuerySyntaxError,
    SchemaError,
    SchemaParseError,
    SchemaReferenceError,
    SchemaValidationFailed,
)
from loadcheck.query import (
    is_equal,
    is_equal_with,
    is_every_item_contain,
    is_every_item_different,
    is_exists,
    is_ordered,
    is_total_data_in_range,
    traverse_object,
)
from loadcheck.schema import (
    CompiledSchema,
    ValidationError,
    ValidationResult,
    compile_schema,
    is_instance_of,
    load_schema,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"

__all__ = [
    "CompiledSchema",
    "LoadcheckError",
    "QuerySyntaxError",
    "SchemaError",
    "SchemaParseError",
    "SchemaReferenceError",
    "SchemaValidationFailed",
    "ValidationError",
    "ValidationResult",
    "compile_schema",
    "is_equal",
    "is_equal_with",
    "is_every_item_contain",
    "is_every_item_different",
    "is_exists",
    "is_instance_of",
    "is_ordered",
    "is_total_data_in_range",
    "load_schema",
    "traverse_object",
]
