import os
import uuid
from collections.abc import Generator
from importlib.resources import files
from typing import Any

import psycopg
import pytest

from docport.config.settings import Settings
from docport.database.connection import close_pool, get_connection, init_pool


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "docport_test")
    return Settings()


def _apply_schema(settings: Settings) -> None:
    schema = files("docport.database").joinpath("schema.sql").read_text(encoding="utf-8")
    with psycopg.connect(
        host=settings.db_host,
        port=settings.db_port,
        dbname=settings.db_database,
        user=settings.db_username,
        password=settings.db_password,
        connect_timeout=3,
    ) as conn:
        conn.execute(schema)
        conn.commit()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        _apply_schema(test_settings)
    except psycopg.Error as e:
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env to point at a disposable database"
        )
    init_pool(test_settings)
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def owner_id(integration_pool: None) -> Generator[str, None, None]:
    """A throwaway owner whose documents are deleted after the test."""
    owner = f"it-{uuid.uuid4().hex[:12]}"
    yield owner
    with get_connection() as conn:
        conn.execute("DELETE FROM documents WHERE user_id = %s", (owner,))
        conn.commit()
