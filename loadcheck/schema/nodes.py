"""
Typed model of a JSON Schema document.

A raw schema is a loosely-typed mapping.  Before validation it is parsed
into a tree of :class:`SchemaNode` objects, one per schema fragment, where
each keyword group lives in its own frozen dataclass:

    ============================  ===========================================
    Group                         Keywords
    ============================  ===========================================
    :class:`StringConstraints`    ``minLength maxLength pattern format``
    :class:`NumberConstraints`    ``minimum maximum exclusiveMinimum
                                  exclusiveMaximum multipleOf``
    :class:`ObjectConstraints`    ``required properties additionalProperties
                                  patternProperties minProperties
                                  maxProperties``
    :class:`ArrayConstraints`     ``items additionalItems minItems maxItems
                                  uniqueItems contains``
    :class:`Combinators`          ``oneOf anyOf allOf``
    :class:`ValueConstraints`     ``enum const``
    ============================  ===========================================

A node may carry any number of groups at once; the validator checks every
group that applies to the value instead of picking one.

Key Concepts Demonstrated:
- Frozen dataclasses as an immutable, shareable schema tree
- Parsing once at compile time so validation never inspects raw dicts
- Schema-authoring mistakes surfacing as ``SchemaParseError`` up front
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from loadcheck.errors import SchemaParseError
from loadcheck.jsonvalues import MISSING, is_number

KNOWN_TYPES = frozenset({"string", "number", "integer", "boolean", "null", "object", "array"})


@dataclass(frozen=True)
class StringConstraints:
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    format: str | None = None


@dataclass(frozen=True)
class NumberConstraints:
    minimum: float | None = None
    maximum: float | None = None
    # Either the legacy boolean flag (paired with minimum/maximum) or a number.
    exclusive_minimum: bool | float | None = None
    exclusive_maximum: bool | float | None = None
    multiple_of: float | None = None


@dataclass(frozen=True, eq=False)
class ObjectConstraints:
    required: tuple[str, ...] = ()
    min_properties: int | None = None
    max_properties: int | None = None
    properties: Mapping[str, SchemaNode] = field(default_factory=dict)
    # False forbids undeclared keys, a node validates them, None allows them.
    additional_properties: bool | SchemaNode | None = None
    pattern_properties: tuple[tuple[str, SchemaNode], ...] = ()

    @property
    def declares_shape(self) -> bool:
        """True when the object checker should run even without ``type``."""
        return bool(self.properties) or self.additional_properties is not None


@dataclass(frozen=True, eq=False)
class ArrayConstraints:
    min_items: int | None = None
    max_items: int | None = None
    unique_items: bool = False
    # One node for homogeneous arrays, a tuple of nodes for positional ones.
    items: SchemaNode | tuple[SchemaNode, ...] | None = None
    additional_items: bool | SchemaNode | None = None
    contains: SchemaNode | None = None


@dataclass(frozen=True, eq=False)
class Combinators:
    one_of: tuple[SchemaNode, ...] = ()
    any_of: tuple[SchemaNode, ...] = ()
    all_of: tuple[SchemaNode, ...] = ()


@dataclass(frozen=True, eq=False)
class ValueConstraints:
    enum: tuple[Any, ...] | None = None
    const: Any = MISSING

    @property
    def has_const(self) -> bool:
        return self.const is not MISSING


@dataclass(frozen=True, eq=False)
class SchemaNode:
    """One schema fragment with every keyword group it declares."""

    ref: str | None = None
    types: tuple[str, ...] | None = None
    string: StringConstraints | None = None
    number: NumberConstraints | None = None
    obj: ObjectConstraints | None = None
    array: ArrayConstraints | None = None
    combinators: Combinators | None = None
    values: ValueConstraints | None = None
    definitions: Mapping[str, SchemaNode] = field(default_factory=dict)


def parse_node(
    raw: Any,
    location: str = "#",
    on_parsed: Callable[[Mapping[str, Any], SchemaNode], None] | None = None,
) -> SchemaNode:
    """
    Parse a raw schema mapping into a :class:`SchemaNode` tree.

    Args:
        raw: The schema fragment as decoded from JSON.
        location: Schema path of *raw*, used in error messages.
        on_parsed: Optional hook called with every ``(raw, node)`` pair, so
            callers can index the tree by raw fragment.

    Returns:
        The parsed node.

    Raises:
        SchemaParseError: If a fragment or keyword has the wrong JSON type.
    """
    if not isinstance(raw, Mapping):
        raise SchemaParseError(f"Schema at {location} must be an object, got {type(raw).__name__}")

    def child(value: Any, suffix: str) -> SchemaNode:
        return parse_node(value, f"{location}/{suffix}", on_parsed)

    ref = raw.get("$ref")
    if ref is not None and not isinstance(ref, str):
        raise SchemaParseError(f"$ref at {location} must be a string")

    node = SchemaNode(
        ref=ref,
        types=_parse_types(raw, location),
        string=_parse_string(raw, location),
        number=_parse_number(raw, location),
        obj=_parse_object(raw, location, child),
        array=_parse_array(raw, location, child),
        combinators=_parse_combinators(raw, location, child),
        values=_parse_values(raw, location),
        definitions={
            name: child(fragment, f"definitions/{name}")
            for name, fragment in _mapping(raw, "definitions", location).items()
        },
    )
    if on_parsed is not None:
        on_parsed(raw, node)
    return node


def _mapping(raw: Mapping[str, Any], keyword: str, location: str) -> Mapping[str, Any]:
    value = raw.get(keyword, {})
    if not isinstance(value, Mapping):
        raise SchemaParseError(f"{keyword} at {location} must be an object")
    return value


def _non_negative_int(raw: Mapping[str, Any], keyword: str, location: str) -> int | None:
    value = raw.get(keyword)
    if value is None:
        return None
    # is_integer() is False for inf and nan.
    if not is_number(value) or value < 0 or (isinstance(value, float) and not value.is_integer()):
        raise SchemaParseError(f"{keyword} at {location} must be a non-negative integer")
    return int(value)


def _number(raw: Mapping[str, Any], keyword: str, location: str) -> float | None:
    value = raw.get(keyword)
    if value is None:
        return None
    if not is_number(value):
        raise SchemaParseError(f"{keyword} at {location} must be a number")
    return value


def _parse_types(raw: Mapping[str, Any], location: str) -> tuple[str, ...] | None:
    declared = raw.get("type")
    if declared is None:
        return None
    names = [declared] if isinstance(declared, str) else declared
    if not isinstance(names, list) or not all(isinstance(name, str) for name in names):
        raise SchemaParseError(f"type at {location} must be a string or a list of strings")
    if not names:
        raise SchemaParseError(f"type at {location} must not be an empty list")
    unknown = [name for name in names if name not in KNOWN_TYPES]
    if unknown:
        raise SchemaParseError(f"Unknown type {unknown[0]!r} at {location}")
    return tuple(names)


def _parse_string(raw: Mapping[str, Any], location: str) -> StringConstraints | None:
    if not any(key in raw for key in ("minLength", "maxLength", "pattern", "format")):
        return None
    pattern = raw.get("pattern")
    if pattern is not None and not isinstance(pattern, str):
        raise SchemaParseError(f"pattern at {location} must be a string")
    return StringConstraints(
        min_length=_non_negative_int(raw, "minLength", location),
        max_length=_non_negative_int(raw, "maxLength", location),
        pattern=pattern,
        format=raw.get("format"),
    )


def _exclusive_bound(raw: Mapping[str, Any], keyword: str, location: str) -> bool | float | None:
    value = raw.get(keyword)
    if value is None or isinstance(value, bool):
        return value
    return _number(raw, keyword, location)


def _parse_number(raw: Mapping[str, Any], location: str) -> NumberConstraints | None:
    keywords = ("minimum", "maximum", "exclusiveMinimum", "exclusiveMaximum", "multipleOf")
    if not any(key in raw for key in keywords):
        return None
    return NumberConstraints(
        minimum=_number(raw, "minimum", location),
        maximum=_number(raw, "maximum", location),
        exclusive_minimum=_exclusive_bound(raw, "exclusiveMinimum", location),
        exclusive_maximum=_exclusive_bound(raw, "exclusiveMaximum", location),
        multiple_of=_number(raw, "multipleOf", location),
    )


def _bool_or_schema(
    raw: Mapping[str, Any],
    keyword: str,
    location: str,
    child: Callable[[Any, str], SchemaNode],
) -> bool | SchemaNode | None:
    value = raw.get(keyword)
    if value is None or isinstance(value, bool):
        return value
    return child(value, keyword)


def _parse_object(raw, location, child) -> ObjectConstraints | None:
    keywords = (
        "required",
        "properties",
        "additionalProperties",
        "patternProperties",
        "minProperties",
        "maxProperties",
    )
    if not any(key in raw for key in keywords):
        return None

    required = raw.get("required", [])
    if not isinstance(required, list) or not all(isinstance(key, str) for key in required):
        raise SchemaParseError(f"required at {location} must be a list of strings")

    return ObjectConstraints(
        required=tuple(required),
        min_properties=_non_negative_int(raw, "minProperties", location),
        max_properties=_non_negative_int(raw, "maxProperties", location),
        properties={
            name: child(fragment, f"properties/{name}")
            for name, fragment in _mapping(raw, "properties", location).items()
        },
        additional_properties=_bool_or_schema(raw, "additionalProperties", location, child),
        pattern_properties=tuple(
            (pattern, child(fragment, f"patternProperties/{pattern}"))
            for pattern, fragment in _mapping(raw, "patternProperties", location).items()
        ),
    )


def _parse_array(raw, location, child) -> ArrayConstraints | None:
    keywords = ("items", "additionalItems", "minItems", "maxItems", "uniqueItems", "contains")
    if not any(key in raw for key in keywords):
        return None

    items = raw.get("items")
    if isinstance(items, list):
        parsed_items = tuple(child(fragment, f"items/{index}") for index, fragment in enumerate(items))
    elif items is not None:
        parsed_items = child(items, "items")
    else:
        parsed_items = None

    contains = raw.get("contains")
    return ArrayConstraints(
        min_items=_non_negative_int(raw, "minItems", location),
        max_items=_non_negative_int(raw, "maxItems", location),
        unique_items=raw.get("uniqueItems") is True,
        items=parsed_items,
        additional_items=_bool_or_schema(raw, "additionalItems", location, child),
        contains=child(contains, "contains") if contains is not None else None,
    )


def _parse_combinators(raw, location, child) -> Combinators | None:
    branches: dict[str, tuple[SchemaNode, ...]] = {}
    for keyword in ("oneOf", "anyOf", "allOf"):
        fragments = raw.get(keyword)
        if fragments is None:
            branches[keyword] = ()
            continue
        if not isinstance(fragments, list) or not fragments:
            raise SchemaParseError(f"{keyword} at {location} must be a non-empty list")
        branches[keyword] = tuple(
            child(fragment, f"{keyword}/{index}") for index, fragment in enumerate(fragments)
        )
    if not any(branches.values()):
        return None
    return Combinators(
        one_of=branches["oneOf"],
        any_of=branches["anyOf"],
        all_of=branches["allOf"],
    )


def _parse_values(raw: Mapping[str, Any], location: str) -> ValueConstraints | None:
    if "enum" not in raw and "const" not in raw:
        return None
    enum = raw.get("enum")
    if enum is not None and not isinstance(enum, list):
        raise SchemaParseError(f"enum at {location} must be a list")
    return ValueConstraints(
        enum=tuple(enum) if enum is not None else None,
        const=raw["const"] if "const" in raw else MISSING,
    )
