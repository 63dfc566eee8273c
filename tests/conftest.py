"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For standard test utilities, see tests/__init__.py
"""

import pytest


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "db: marks tests as requiring database (deselect with '-m \"not db\"')"
    )


@pytest.fixture(scope="session")
def test_db_url():
    """URL of the external test database; skips when none is reachable."""
    from tests import TEST_DB_URL, check_db_available

    if not check_db_available():
        pytest.skip("Test database not available (set TEST_DATABASE_URL)")
    return TEST_DB_URL


@pytest.fixture
def db_session(test_db_url):
    """Session on freshly created tables, dropped again after the test."""
    from sqlalchemy import create_engine
    from sqlalchemy.orm import sessionmaker

    from database.models import Base

    engine = create_engine(test_db_url)
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()
