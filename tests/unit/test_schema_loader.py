"""
Unit tests for loading schema fixtures from disk.
"""

from __future__ import annotations

import pytest

from loadcheck.config import TestingConfig
from loadcheck.errors import SchemaParseError
from loadcheck.schema import is_instance_of, load_schema

pytestmark = pytest.mark.unit


def test_load_json_schema_file(schemas_dir, valid_user):
    """Test that a ``.json`` fixture compiles and validates."""
    # Act
    schema = load_schema(schemas_dir / "user.schema.json", TestingConfig)

    # Assert
    assert schema.validate(valid_user).valid
    assert repr(schema) == "<CompiledSchema User>"


def test_load_yaml_schema_file(schemas_dir):
    """Test that a ``.yaml`` fixture compiles to the same kind of schema."""
    # Arrange
    schema = load_schema(schemas_dir / "product.schema.yaml", TestingConfig)
    product = {"productId": "p-1", "name": "Shirt", "price": 9.5, "qty": 3, "category": "Clothing"}

    # Act
    valid = schema.validate(product)
    invalid = schema.validate({**product, "qty": 1.5, "category": "Toys"})

    # Assert
    assert valid.valid
    assert sorted(error.path for error in invalid.errors) == ["category", "qty"]


def test_missing_file_raises_parse_error(schemas_dir):
    """Test that an unreadable fixture is reported as a schema error."""
    with pytest.raises(SchemaParseError, match="Unable to read schema file"):
        load_schema(schemas_dir / "nope.schema.json", TestingConfig)


@pytest.mark.parametrize("file_name", ["broken.schema.json", "broken.schema.yaml"])
def test_broken_fixture_raises_parse_error(schemas_dir, file_name):
    """Test that malformed JSON and YAML both raise ``SchemaParseError``."""
    with pytest.raises(SchemaParseError):
        load_schema(schemas_dir / file_name, TestingConfig)


def test_load_schema_accepts_string_paths(schemas_dir):
    """Test that plain string paths work as well as ``Path`` objects."""
    schema = load_schema(str(schemas_dir / "product.schema.yaml"), TestingConfig)

    assert not schema.validate({}).valid


class TestIsInstanceOf:
    """Tests for the typed-assertion helper."""

    def test_valid_object(self, user_schema, valid_user):
        assert is_instance_of(valid_user, user_schema)

    @pytest.mark.parametrize("value", [None, [], "user", 1])
    def test_non_objects_are_rejected(self, user_schema, value):
        """Test that non-objects never reach validation."""
        assert is_instance_of(value, user_schema) is False

    def test_invalid_object(self, user_schema, valid_user):
        del valid_user["role"]

        assert is_instance_of(valid_user, user_schema) is False
