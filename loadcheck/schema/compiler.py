"""
Schema compilation: text in, reusable validator out.

A schema is compiled once, typically when the test module that owns it is
imported, and then validated against every response body of the run::

    user_schema = compile_schema(Path("schemas/user.schema.json").read_text())

    result = user_schema.validate(response.json())
    result.raise_if_invalid("GET /v1/user")

Key Concepts Demonstrated:
- Parse once, validate many times
- Immutable compiled objects that are safe to share between Locust users
- Schema-authoring problems raised early, data problems returned as values
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from loadcheck.config import Config, get_config
from loadcheck.errors import SchemaParseError
from loadcheck.schema.resolver import ValidationContext, build_context, resolve
from loadcheck.schema.validator import ValidationResult, Validator

logger = logging.getLogger(__name__)


class CompiledSchema:
    """
    A parsed schema document bound to its validator.

    Calling the object is the same as calling :meth:`validate`, so a compiled
    schema can be passed anywhere a ``validate(value)`` function is expected.

    Attributes:
        context: Reference-resolution context of the document.
    """

    def __init__(self, document: Mapping[str, Any], config_class: type[Config] | None = None) -> None:
        config_class = config_class or get_config()
        self.context: ValidationContext = build_context(document)
        self._validator = Validator(self.context, config_class.MAX_VALIDATION_DEPTH)

    @property
    def document(self) -> Mapping[str, Any]:
        return self.context.document

    def validate(self, value: Any) -> ValidationResult:
        """
        Validate *value* and return every violation found.

        Args:
            value: Already-parsed JSON (dicts, lists, strings, numbers,
                booleans and ``None``).

        Returns:
            A :class:`ValidationResult`; ``valid`` is True exactly when
            ``errors`` is empty.

        Raises:
            SchemaReferenceError: If the schema holds a dangling or circular
                ``$ref`` on the path taken by *value*.
        """
        root = resolve(self.context.root, self.context)
        errors = self._validator.check(value, root, "", "#")
        return ValidationResult(valid=not errors, errors=tuple(errors))

    __call__ = validate

    def is_valid(self, value: Any) -> bool:
        return self.validate(value).valid

    def __repr__(self) -> str:
        title = self.document.get("title") or self.document.get("$id") or "anonymous"
        return f"<CompiledSchema {title}>"


def compile_schema_document(
    document: Any,
    config_class: type[Config] | None = None,
) -> CompiledSchema:
    """Compile an already-decoded schema document."""
    if not isinstance(document, Mapping):
        raise SchemaParseError(
            f"Schema document must be a JSON object, got {type(document).__name__}"
        )
    compiled = CompiledSchema(document, config_class)
    logger.debug("Compiled schema %r", compiled)
    return compiled


def compile_schema(schema_text: str, config_class: type[Config] | None = None) -> CompiledSchema:
    """
    Parse JSON schema text and compile it.

    Args:
        schema_text: The schema document as JSON text.
        config_class: Optional configuration; defaults to :func:`get_config`.

    Returns:
        The compiled schema.

    Raises:
        SchemaParseError: If *schema_text* is not valid JSON, or a keyword
            has the wrong shape.
    """
    try:
        document = json.loads(schema_text)
    except (TypeError, ValueError) as exc:
        raise SchemaParseError(f"Invalid JSON schema string: {exc}") from exc
    return compile_schema_document(document, config_class)
