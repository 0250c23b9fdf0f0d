"""
Shared fixtures for integration tests.

Every integration test starts from empty tables.
"""

from collections.abc import Generator

import pytest


@pytest.fixture(autouse=True)
def _empty_tables(clean_database: None) -> Generator[None, None, None]:
    yield
