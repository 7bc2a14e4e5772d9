"""JSON Schema compilation and validation."""

from loadcheck.schema.compiler import CompiledSchema, compile_schema, compile_schema_document
from loadcheck.schema.loader import is_instance_of, load_schema
from loadcheck.schema.nodes import SchemaNode, parse_node
from loadcheck.schema.resolver import ValidationContext, build_context, resolve
from loadcheck.schema.validator import ValidationError, ValidationResult, Validator, check

__all__ = [
    "CompiledSchema",
    "SchemaNode",
    "ValidationContext",
    "ValidationError",
    "ValidationResult",
    "Validator",
    "build_context",
    "check",
    "compile_schema",
    "compile_schema_document",
    "is_instance_of",
    "load_schema",
    "parse_node",
    "resolve",
]
