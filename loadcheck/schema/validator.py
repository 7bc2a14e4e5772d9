"""
Recursive JSON Schema validation.

Validation never stops at the first problem.  Every keyword that applies to
a value is checked and every violation is reported, so a single call shows
the full picture of what is wrong with a response body.  Each check builds
and returns its own error list; callers merge child results explicitly.

Evaluation order at one schema node:

1. ``null`` values are checked against the declared ``type`` only; a node
   without ``type`` rejects null.
2. :data:`~loadcheck.jsonvalues.MISSING` is always an error.
3. ``oneOf`` / ``anyOf`` / ``allOf``.
4. ``enum`` and ``const``.
5. ``type`` dispatch to the string, number, object or array checker.
6. Without ``type``, object and array keywords still run for values of
   the matching kind.

Combinators run in addition to the type checks, so one defect can show up
twice (for instance as a type error and as a ``oneOf`` mismatch).

Key Concepts Demonstrated:
- Pure recursive checks returning fresh error lists
- Isolated sub-validation for ``oneOf``/``anyOf``/``contains``
- Diagnostic paths for both the value and the schema
"""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Sequence

from loadcheck.errors import SchemaValidationFailed
from loadcheck.jsonvalues import (
    MISSING,
    canonical_json,
    is_number,
    json_equal,
    json_type,
    utf16_length,
)
from loadcheck.schema.formats import check_format
from loadcheck.schema.nodes import (
    ArrayConstraints,
    NumberConstraints,
    ObjectConstraints,
    SchemaNode,
    StringConstraints,
)
from loadcheck.schema.resolver import ValidationContext, resolve

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 128


@dataclass(frozen=True)
class ValidationError:
    """
    One violation found during validation.

    Attributes:
        path: Location in the value, e.g. ``"items[2].email"`` (``""`` is the
            root).
        message: Human-readable description of the violation.
        value: The offending value.
        schema_path: Location in the schema, e.g. ``"#/properties/email/format"``.
    """

    path: str
    message: str
    value: Any
    schema_path: str


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one value."""

    valid: bool
    errors: tuple[ValidationError, ...] = ()

    def __bool__(self) -> bool:
        return self.valid

    def raise_if_invalid(self, subject: str = "value") -> None:
        """
        Raise :class:`~loadcheck.errors.SchemaValidationFailed` when invalid.

        Lets a test turn the error list into a failed assertion with one call.
        """
        if not self.valid:
            raise SchemaValidationFailed(self.errors, subject)


def _child_path(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _index_path(path: str, index: int) -> str:
    return f"{path}[{index}]"


@lru_cache(maxsize=512)
def _compile_pattern(source: str) -> re.Pattern[str] | None:
    try:
        return re.compile(source)
    except re.error:
        return None


def _is_integral(value: Any) -> bool:
    return isinstance(value, int) or float(value).is_integer()


def _describe(value: Any) -> str:
    return json.dumps(value, default=repr)


class Validator:
    """
    Checks values against schema nodes of one compiled document.

    Holds no per-call state, so one instance can serve any number of
    validations, including concurrent ones.
    """

    def __init__(self, context: ValidationContext, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.context = context
        self.max_depth = max_depth

    def check(
        self,
        value: Any,
        node: SchemaNode,
        path: str = "",
        schema_path: str = "#",
        depth: int = 0,
    ) -> list[ValidationError]:
        """Return every violation of *node* by *value*."""
        if depth > self.max_depth:
            logger.debug("Validation depth %d exceeded at %s", self.max_depth, schema_path)
            return [ValidationError(path, "Maximum validation depth exceeded", value, schema_path)]

        node = resolve(node, self.context)

        if value is None:
            if node.types is not None and "null" in node.types:
                return []
            allowed = " | ".join(node.types) if node.types else "any"
            return [ValidationError(path, f"Expected type {allowed} but got null", value, f"{schema_path}/type")]

        if value is MISSING:
            return [ValidationError(path, "Value is undefined", value, schema_path)]

        errors: list[ValidationError] = []
        errors.extend(self._check_combinators(value, node, path, schema_path, depth))
        errors.extend(self._check_values(value, node, path, schema_path))

        if node.types is not None:
            errors.extend(self._check_type(value, node, path, schema_path, depth))
        else:
            if node.obj is not None and node.obj.declares_shape and isinstance(value, dict):
                errors.extend(self._check_object(value, node.obj, path, schema_path, depth))
            if node.array is not None and node.array.items is not None and isinstance(value, list):
                errors.extend(self._check_array(value, node.array, path, schema_path, depth))
        return errors

    def _passes(self, value: Any, node: SchemaNode, path: str, schema_path: str, depth: int) -> bool:
        return not self.check(value, node, path, schema_path, depth + 1)

    def _check_combinators(self, value, node, path, schema_path, depth) -> list[ValidationError]:
        combinators = node.combinators
        if combinators is None:
            return []

        errors: list[ValidationError] = []
        if combinators.one_of:
            matched = sum(
                1
                for index, branch in enumerate(combinators.one_of)
                if self._passes(value, branch, path, f"{schema_path}/oneOf/{index}", depth)
            )
            if matched != 1:
                errors.append(
                    ValidationError(
                        path,
                        f"Expected exactly one schema to match in oneOf, but {matched} matched",
                        value,
                        f"{schema_path}/oneOf",
                    )
                )

        if combinators.any_of:
            if not any(
                self._passes(value, branch, path, f"{schema_path}/anyOf/{index}", depth)
                for index, branch in enumerate(combinators.any_of)
            ):
                errors.append(
                    ValidationError(
                        path,
                        "Expected at least one schema to match in anyOf",
                        value,
                        f"{schema_path}/anyOf",
                    )
                )

        for index, branch in enumerate(combinators.all_of):
            errors.extend(self.check(value, branch, path, f"{schema_path}/allOf/{index}", depth + 1))
        return errors

    def _check_values(self, value, node, path, schema_path) -> list[ValidationError]:
        constraints = node.values
        if constraints is None:
            return []

        errors: list[ValidationError] = []
        if constraints.enum is not None and not any(
            json_equal(value, allowed) for allowed in constraints.enum
        ):
            errors.append(
                ValidationError(
                    path,
                    f"Value must be one of: {_describe(list(constraints.enum))}",
                    value,
                    f"{schema_path}/enum",
                )
            )
        if constraints.has_const and not json_equal(value, constraints.const):
            errors.append(
                ValidationError(
                    path,
                    f"Value must be equal to constant: {_describe(constraints.const)}",
                    value,
                    f"{schema_path}/const",
                )
            )
        return errors

    def _check_type(self, value, node, path, schema_path, depth) -> list[ValidationError]:
        actual = json_type(value)
        for name in node.types:
            if name == "integer" and actual == "number" and _is_integral(value):
                return self._check_number(value, node.number, path, schema_path, integer=True)
            if name == actual:
                return self._run_type_checker(name, value, node, path, schema_path, depth)

        # A fractional number against an integer type is reported by the
        # number checker, not as a type mismatch.
        if actual == "number" and "integer" in node.types:
            return self._check_number(value, node.number, path, schema_path, integer=True)

        allowed = " | ".join(node.types)
        return [
            ValidationError(
                path,
                f"Expected type {allowed} but got {actual}",
                value,
                f"{schema_path}/type",
            )
        ]

    def _run_type_checker(self, name, value, node, path, schema_path, depth) -> list[ValidationError]:
        if name == "string":
            return self._check_string(value, node.string, path, schema_path)
        if name == "number":
            return self._check_number(value, node.number, path, schema_path, integer=False)
        if name == "object" and node.obj is not None:
            return self._check_object(value, node.obj, path, schema_path, depth)
        if name == "array" and node.array is not None:
            return self._check_array(value, node.array, path, schema_path, depth)
        return []

    def _check_string(
        self,
        value: str,
        constraints: StringConstraints | None,
        path: str,
        schema_path: str,
    ) -> list[ValidationError]:
        if constraints is None:
            return []

        errors: list[ValidationError] = []
        length = utf16_length(value)
        if constraints.min_length is not None and length < constraints.min_length:
            errors.append(
                ValidationError(
                    path,
                    f"String is shorter than minimum length of {constraints.min_length}",
                    value,
                    f"{schema_path}/minLength",
                )
            )
        if constraints.max_length is not None and length > constraints.max_length:
            errors.append(
                ValidationError(
                    path,
                    f"String is longer than maximum length of {constraints.max_length}",
                    value,
                    f"{schema_path}/maxLength",
                )
            )
        if constraints.pattern is not None:
            compiled = _compile_pattern(constraints.pattern)
            if compiled is None:
                errors.append(
                    ValidationError(
                        path,
                        f"Invalid regular expression pattern: {constraints.pattern}",
                        value,
                        f"{schema_path}/pattern",
                    )
                )
            elif compiled.search(value) is None:
                errors.append(
                    ValidationError(
                        path,
                        f"String does not match pattern: {constraints.pattern}",
                        value,
                        f"{schema_path}/pattern",
                    )
                )
        if constraints.format is not None and not check_format(constraints.format, value):
            errors.append(
                ValidationError(
                    path,
                    f"String is not a valid {constraints.format}",
                    value,
                    f"{schema_path}/format",
                )
            )
        return errors

    def _check_number(
        self,
        value: float,
        constraints: NumberConstraints | None,
        path: str,
        schema_path: str,
        *,
        integer: bool,
    ) -> list[ValidationError]:
        errors: list[ValidationError] = []
        if integer and not _is_integral(value):
            errors.append(ValidationError(path, "Number must be an integer", value, f"{schema_path}/type"))
        if constraints is None:
            return errors

        minimum = constraints.minimum
        maximum = constraints.maximum
        exclusive_minimum = constraints.exclusive_minimum
        exclusive_maximum = constraints.exclusive_maximum

        if minimum is not None:
            if exclusive_minimum is True and value <= minimum:
                errors.append(
                    ValidationError(
                        path,
                        f"Number must be greater than {minimum}",
                        value,
                        f"{schema_path}/exclusiveMinimum",
                    )
                )
            elif exclusive_minimum is not True and value < minimum:
                errors.append(
                    ValidationError(
                        path,
                        f"Number must be greater than or equal to {minimum}",
                        value,
                        f"{schema_path}/minimum",
                    )
                )
        if maximum is not None:
            if exclusive_maximum is True and value >= maximum:
                errors.append(
                    ValidationError(
                        path,
                        f"Number must be less than {maximum}",
                        value,
                        f"{schema_path}/exclusiveMaximum",
                    )
                )
            elif exclusive_maximum is not True and value > maximum:
                errors.append(
                    ValidationError(
                        path,
                        f"Number must be less than or equal to {maximum}",
                        value,
                        f"{schema_path}/maximum",
                    )
                )

        if is_number(exclusive_minimum) and value <= exclusive_minimum:
            errors.append(
                ValidationError(
                    path,
                    f"Number must be greater than {exclusive_minimum}",
                    value,
                    f"{schema_path}/exclusiveMinimum",
                )
            )
        if is_number(exclusive_maximum) and value >= exclusive_maximum:
            errors.append(
                ValidationError(
                    path,
                    f"Number must be less than {exclusive_maximum}",
                    value,
                    f"{schema_path}/exclusiveMaximum",
                )
            )

        multiple_of = constraints.multiple_of
        # Plain float modulo, so 0.3 is not a multiple of 0.1.
        if multiple_of is not None and (multiple_of == 0 or math.fmod(value, multiple_of) != 0):
            errors.append(
                ValidationError(
                    path,
                    f"Number must be a multiple of {multiple_of}",
                    value,
                    f"{schema_path}/multipleOf",
                )
            )
        return errors

    def _check_object(
        self,
        value: dict[str, Any],
        constraints: ObjectConstraints,
        path: str,
        schema_path: str,
        depth: int,
    ) -> list[ValidationError]:
        errors: list[ValidationError] = []

        for key in constraints.required:
            if key not in value:
                errors.append(
                    ValidationError(
                        _child_path(path, key),
                        f"Missing required property: {key}",
                        MISSING,
                        f"{schema_path}/required",
                    )
                )

        count = len(value)
        if constraints.min_properties is not None and count < constraints.min_properties:
            errors.append(
                ValidationError(
                    path,
                    f"Object must have at least {constraints.min_properties} properties",
                    value,
                    f"{schema_path}/minProperties",
                )
            )
        if constraints.max_properties is not None and count > constraints.max_properties:
            errors.append(
                ValidationError(
                    path,
                    f"Object must have at most {constraints.max_properties} properties",
                    value,
                    f"{schema_path}/maxProperties",
                )
            )

        for key, property_node in constraints.properties.items():
            if key in value:
                errors.extend(
                    self.check(
                        value[key],
                        property_node,
                        _child_path(path, key),
                        f"{schema_path}/properties/{key}",
                        depth + 1,
                    )
                )

        patterns: list[tuple[str, re.Pattern[str], SchemaNode]] = []
        for source, pattern_node in constraints.pattern_properties:
            compiled = _compile_pattern(source)
            if compiled is None:
                errors.append(
                    ValidationError(
                        path,
                        f"Invalid regular expression pattern: {source}",
                        value,
                        f"{schema_path}/patternProperties/{source}",
                    )
                )
                continue
            patterns.append((source, compiled, pattern_node))

        additional = constraints.additional_properties
        if additional is not None and additional is not True:
            for key, item in value.items():
                if key in constraints.properties:
                    continue
                if any(compiled.search(key) for _, compiled, _ in patterns):
                    continue
                if additional is False:
                    errors.append(
                        ValidationError(
                            _child_path(path, key),
                            f"Additional property not allowed: {key}",
                            item,
                            f"{schema_path}/additionalProperties",
                        )
                    )
                else:
                    errors.extend(
                        self.check(
                            item,
                            additional,
                            _child_path(path, key),
                            f"{schema_path}/additionalProperties",
                            depth + 1,
                        )
                    )

        for source, compiled, pattern_node in patterns:
            for key, item in value.items():
                if compiled.search(key):
                    errors.extend(
                        self.check(
                            item,
                            pattern_node,
                            _child_path(path, key),
                            f"{schema_path}/patternProperties/{source}",
                            depth + 1,
                        )
                    )
        return errors

    def _check_array(
        self,
        value: list[Any],
        constraints: ArrayConstraints,
        path: str,
        schema_path: str,
        depth: int,
    ) -> list[ValidationError]:
        errors: list[ValidationError] = []

        if constraints.min_items is not None and len(value) < constraints.min_items:
            errors.append(
                ValidationError(
                    path,
                    f"Array must have at least {constraints.min_items} items",
                    value,
                    f"{schema_path}/minItems",
                )
            )
        if constraints.max_items is not None and len(value) > constraints.max_items:
            errors.append(
                ValidationError(
                    path,
                    f"Array must have at most {constraints.max_items} items",
                    value,
                    f"{schema_path}/maxItems",
                )
            )

        if constraints.unique_items:
            seen: set[str] = set()
            duplicates: list[int] = []
            for index, item in enumerate(value):
                key = canonical_json(item)
                if key in seen:
                    duplicates.append(index)
                else:
                    seen.add(key)
            if duplicates:
                errors.append(
                    ValidationError(
                        path,
                        "Array items must be unique. Duplicate items found at indexes: "
                        + ", ".join(str(index) for index in duplicates),
                        value,
                        f"{schema_path}/uniqueItems",
                    )
                )

        items = constraints.items
        if isinstance(items, SchemaNode):
            for index, item in enumerate(value):
                errors.extend(
                    self.check(item, items, _index_path(path, index), f"{schema_path}/items", depth + 1)
                )
        elif isinstance(items, tuple):
            for index, item in enumerate(value[: len(items)]):
                errors.extend(
                    self.check(
                        item,
                        items[index],
                        _index_path(path, index),
                        f"{schema_path}/items/{index}",
                        depth + 1,
                    )
                )
            additional = constraints.additional_items
            for index in range(len(items), len(value)):
                if additional is False:
                    errors.append(
                        ValidationError(
                            _index_path(path, index),
                            f"Additional item not allowed at index {index}",
                            value[index],
                            f"{schema_path}/additionalItems",
                        )
                    )
                elif isinstance(additional, SchemaNode):
                    errors.extend(
                        self.check(
                            value[index],
                            additional,
                            _index_path(path, index),
                            f"{schema_path}/additionalItems",
                            depth + 1,
                        )
                    )

        if constraints.contains is not None:
            contains_path = f"{schema_path}/contains"
            if not any(
                self._passes(item, constraints.contains, _index_path(path, index), contains_path, depth)
                for index, item in enumerate(value)
            ):
                errors.append(
                    ValidationError(
                        path,
                        "Array must contain at least one item matching the contains schema",
                        value,
                        contains_path,
                    )
                )
        return errors


def check(
    value: Any,
    node: SchemaNode,
    context: ValidationContext,
    path: str = "",
    schema_path: str = "#",
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> list[ValidationError]:
    """
    Validate *value* against *node* and return every violation found.

    Never raises for bad data.  Raises
    :class:`~loadcheck.errors.SchemaReferenceError` only when the schema
    itself holds a dangling or circular ``$ref``.
    """
    return Validator(context, max_depth).check(value, node, path, schema_path)


def summarize(errors: Sequence[ValidationError]) -> str:
    """One line per error, for log output."""
    return "\n".join(f"{error.path or '<root>'}: {error.message}" for error in errors)
