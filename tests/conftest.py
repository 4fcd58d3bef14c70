from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from laptracker import services
from laptracker.auth import COOKIE_NAME
from laptracker.db import dispose_db, session_factory
from laptracker.main import create_app
from laptracker.schemas import RunnerCreate
from laptracker.security import SessionToken, TokenCodec
from laptracker.settings import Settings

ADMIN_EMAIL = "admin@example.org"
ADMIN_PASSWORD = "admin-pass"
TEST_SECRET = "test-secret"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        LAPTRACKER_DB_URL=f"sqlite:///{tmp_path / 'laptracker.db'}",
        LAPTRACKER_SECRET_KEY=TEST_SECRET,
        LAPTRACKER_ADMIN_EMAIL=ADMIN_EMAIL,
        LAPTRACKER_ADMIN_PASSWORD=ADMIN_PASSWORD,
    )


@pytest.fixture
def client(settings: Settings):
    dispose_db()
    app = create_app(settings)
    with TestClient(app) as c:
        yield c
    dispose_db()


@pytest.fixture
def db(client: TestClient):
    s = session_factory()()
    try:
        yield s
    finally:
        s.close()


def login_as(client: TestClient, email: str, role: str, *, secret: str = TEST_SECRET) -> None:
    raw = TokenCodec(secret).dumps(SessionToken(email=email, user_role=role))
    client.cookies.set(COOKIE_NAME, raw)


def add_runner(session, number: int, *, first: str = "Anna", last: str = "Berg", grade: str = "5a", house: str = "Nord", laps: int = 0):
    services.create_runner(
        session,
        RunnerCreate(number=number, first_name=first, last_name=last, grade=grade, house=house),
    )
    for _ in range(laps):
        services.add_lap(session, number)
