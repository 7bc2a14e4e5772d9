"""
Loading schema fixtures from disk.

Response schemas usually live next to the scenarios as ``*.schema.json``
files; contract documents are often kept as YAML.  Both compile to the same
:class:`~loadcheck.schema.compiler.CompiledSchema`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from loadcheck.config import Config
from loadcheck.errors import SchemaParseError
from loadcheck.schema.compiler import CompiledSchema, compile_schema, compile_schema_document

YAML_SUFFIXES = {".yaml", ".yml"}


def load_schema(path: str | Path, config_class: type[Config] | None = None) -> CompiledSchema:
    """
    Read and compile a schema file.

    Args:
        path: A ``.json`` file, or a ``.yaml``/``.yml`` file.
        config_class: Optional configuration passed to the compiler.

    Returns:
        The compiled schema.

    Raises:
        SchemaParseError: If the file cannot be read or does not hold a
            valid schema document.
    """
    schema_path = Path(path)
    try:
        text = schema_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaParseError(f"Unable to read schema file '{schema_path}': {exc}") from exc

    if schema_path.suffix.lower() in YAML_SUFFIXES:
        try:
            document = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise SchemaParseError(f"Invalid YAML schema in '{schema_path}': {exc}") from exc
        return compile_schema_document(document, config_class)

    return compile_schema(text, config_class)


def is_instance_of(value: Any, schema: CompiledSchema) -> bool:
    """
    Return True when *value* is a JSON object that satisfies *schema*.

    The typed-assertion helpers built on this (``is_user``, ``is_product``
    and friends) only ever describe objects, so anything else is rejected
    before validation.
    """
    if not isinstance(value, dict):
        return False
    return schema.is_valid(value)
