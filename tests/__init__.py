"""
Test suite for loadcheck.

This package contains:
- unit/: fast tests of the schema validator, path queries, predicates,
  check harness, Locust integration and configuration
- fixtures/: schema files used by the loader tests
"""
