import dataclasses

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text

from todo_api.main import create_app
from todo_api.settings import get_settings

TODOS_DDL = """
CREATE TABLE todos (
    id INTEGER PRIMARY KEY,
    title TEXT NOT NULL,
    completed BOOLEAN NOT NULL
)
"""


def run_sql(url: str, *statements: str) -> None:
    """Execute statements on a fresh engine, outside the app's pool."""
    engine = create_engine(url)
    try:
        with engine.begin() as conn:
            for stmt in statements:
                conn.execute(text(stmt))
    finally:
        engine.dispose()


def settings_for(url: str):
    return dataclasses.replace(get_settings(), database_url=url)


@pytest.fixture
def db_url(tmp_path):
    url = f"sqlite:///{tmp_path / 'todos.db'}"
    run_sql(url, TODOS_DDL)
    return url


@pytest.fixture
def client(db_url):
    app = create_app(settings_for(db_url))
    with TestClient(app) as c:
        yield c
