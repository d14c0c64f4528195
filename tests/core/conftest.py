"""
Pytest configuration for core unit tests.

The dedupe, flagging and event linking functions are pure, so these tests
don't need database setup.
"""

import pytest


# Override the autouse database fixture from the parent conftest
@pytest.fixture(autouse=True)
async def setup_database():
    """No-op database setup for unit tests."""
    yield
