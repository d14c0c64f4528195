"""
Pytest configuration for service tests.

Sheet parsing is pure and the Google client is mocked, so no tables are
needed here.
"""

import pytest


@pytest.fixture(autouse=True)
async def setup_database():
    """Skip table setup from the parent conftest."""
    yield
