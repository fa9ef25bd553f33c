"""Pytest configuration for integration tests."""

import os

import pytest


# Mark all tests in this directory as integration tests
def pytest_collection_modifyitems(items):
    """Add integration marker to all tests in this directory."""
    for item in items:
        if "integration_tests" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
            if not os.environ.get("SUPABASE_URL"):
                item.add_marker(pytest.mark.skip(reason="SUPABASE_URL not set"))
