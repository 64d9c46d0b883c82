"""Pytest configuration and shared fixtures for cfgstore tests.

This module provides database fixtures, a settings factory, and store
instances for testing the repository, the store, and the command line without
touching a real settings database.
"""

from __future__ import annotations

import logging
import tempfile
from contextlib import contextmanager
from pathlib import Path

import pytest

# Import models so they register with SQLModel metadata
from cfgstore.models import Setting  # noqa: F401
from cfgstore.infra.repositories import SQLModelSettingsRepository
from cfgstore.services.settings_store import SettingsStore
from sqlmodel import Session, SQLModel, create_engine

@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by setup_logging so they don't leak between tests."""
    yield
    package_logger = logging.getLogger("cfgstore")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the one built by ``create_session_factory``.

    Returns:
        Callable: Factory function that returns transactional session contexts
    """

    @contextmanager
    def factory():
        session = Session(db_engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return factory


@pytest.fixture
def repository(session_factory) -> SQLModelSettingsRepository:
    return SQLModelSettingsRepository(session_factory)


@pytest.fixture
def store(repository) -> SettingsStore:
    """Fail-soft settings store backed by the test database."""
    return SettingsStore(repository)


@pytest.fixture
def strict_store(repository) -> SettingsStore:
    """Settings store that rejects malformed input."""
    return SettingsStore(repository, strict=True)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def setting_factory(store):
    """Factory for creating settings through the store.

    Returns:
        Callable: Function that creates and persists Setting instances
    """

    def _create_setting(
        key: str = "app.name",
        value: str = "cfgstore",
        setting_type: str = "string",
        category: str | None = None,
        description: str | None = None,
    ) -> Setting:
        return store.set(
            key,
            value,
            category=category,
            setting_type=setting_type,
            description=description,
        )

    return _create_setting


@pytest.fixture
def seed_settings(setting_factory):
    """A small mixed set of settings across two categories plus one uncategorized.

    Returns:
        dict: Dictionary mapping keys to Setting instances
    """
    rows = [
        ("mail.port", "25", "integer", "mail"),
        ("mail.driver", "smtp", "string", "mail"),
        ("mail.tls", "yes", "boolean", "mail"),
        ("dns.provider", "powerdns", "string", "dns"),
        ("dns.ttl", "3600", "integer", "dns"),
        ("app.features", '{"cms": true, "wg": false}', "json", None),
    ]
    return {
        key: setting_factory(key, value, setting_type=tag, category=category)
        for key, value, tag, category in rows
    }
