import os
import uuid
from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from intake.config.settings import Settings
from intake.database.connection import close_pool, get_connection, init_pool


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "provider_onboarding_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            conn.execute("SELECT 1 FROM business_documents LIMIT 1")
    except Exception as e:
        close_pool()
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env to a database with the onboarding schema"
        )
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def seed_business(
    db_conn: psycopg.Connection[Any],
) -> Generator[str, None, None]:
    """Insert a sole-proprietorship business owned by a fresh user id."""
    business_id = str(uuid.uuid4())
    with db_conn.cursor() as cur:
        cur.execute(
            """
            INSERT INTO business_profiles (id, business_type, verification_status, setup_step)
            VALUES (%s, 'sole_proprietorship', 'pending', 1)
            """,
            (business_id,),
        )
    db_conn.commit()
    try:
        yield business_id
    finally:
        with db_conn.cursor() as cur:
            cur.execute("DELETE FROM business_documents WHERE business_id = %s", (business_id,))
            cur.execute("DELETE FROM business_profiles WHERE id = %s", (business_id,))
        db_conn.commit()
