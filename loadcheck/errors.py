"""
Exception hierarchy for loadcheck.

Two families of failure exist and they are handled very differently:

* **Schema-authoring errors** -- the schema text cannot be parsed, or a
  ``$ref`` points nowhere.  These mean a test fixture is broken, so they are
  raised immediately.
* **Data errors** -- the value under test does not satisfy the schema.  These
  are never raised by the validator; they are collected into a
  :class:`~loadcheck.schema.validator.ValidationResult` and the caller decides
  what to do with them (see :class:`SchemaValidationFailed`).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from loadcheck.schema.validator import ValidationError


class LoadcheckError(Exception):
    """Base class for every error raised by loadcheck."""


class SchemaError(LoadcheckError):
    """The schema document itself is unusable."""


class SchemaParseError(SchemaError, ValueError):
    """Schema text is not valid JSON (or YAML), or is not a JSON object."""


class SchemaReferenceError(SchemaError, ReferenceError):
    """A ``$ref`` pointer is dangling or part of a reference cycle."""

    def __init__(self, message: str, ref: str) -> None:
        super().__init__(message)
        self.ref = ref


class QuerySyntaxError(LoadcheckError, ValueError):
    """A path query does not follow the dot/``[]`` grammar."""

    def __init__(self, message: str, query: str) -> None:
        super().__init__(f"{message} in query {query!r}")
        self.query = query


class SchemaValidationFailed(AssertionError):
    """
    Raised by call sites that turn a failed validation into a failed test.

    Attributes:
        errors: The validation errors that caused the failure.
    """

    def __init__(self, errors: Sequence[ValidationError], subject: str = "value") -> None:
        self.errors = list(errors)
        lines = [f"{subject} failed schema validation with {len(self.errors)} error(s):"]
        for error in self.errors:
            location = error.path or "<root>"
            lines.append(f"  - {location}: {error.message} (schema: {error.schema_path})")
        super().__init__("\n".join(lines))
