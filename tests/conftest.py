"""
Shared fixtures: a fresh SQLite database per test, seeded with the demo users.
"""

import hashlib

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from hashtext_api.config import Settings
from hashtext_api.db import HashTextDatabase, hash_texts
from hashtext_api.hashing import user_token
from hashtext_api.main import create_app

USERS = [
    ("Jane", 1000000),
    ("Xiomara", 1000000),
    ("Petra", 0),  # Petra has no credit and cannot submit text
]

JANE = user_token("Jane")
XIOMARA = user_token("Xiomara")
PETRA = user_token("Petra")


def sha256(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def count_texts(database: HashTextDatabase) -> int:
    with database._get_engine().connect() as conn:
        return conn.execute(select(func.count()).select_from(hash_texts)).scalar_one()


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'hashtext_test.db'}"


@pytest.fixture
def database(database_url):
    """Seeded database."""
    db = HashTextDatabase(database_url)
    for name, credit in USERS:
        db.create_user(name, credit=credit)
    yield db
    db.close()


@pytest.fixture
def app(database, database_url):
    return create_app(settings=Settings(database_url=database_url), database=database)


@pytest.fixture
def client(app):
    """Create test client."""
    with TestClient(app) as test_client:
        yield test_client
