from __future__ import annotations

import os
import tempfile
from pathlib import Path

_DB_DIR = Path(tempfile.mkdtemp(prefix="myspace-tests-"))

os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR / 'test.db'}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ.pop("REDIS_URL", None)

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.db import Base, SessionLocal, engine
from app.main import app

REPUTATION_KEY_VARS = (
    "GOOGLE_SAFE_BROWSING_API_KEY",
    "IPQUALITYSCORE_API_KEY",
    "VIRUSTOTAL_API_KEY",
)


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "", payload: object = None) -> None:
        self.status_code = status_code
        self.text = text
        self._payload = payload

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> object:
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch):
    for name in REPUTATION_KEY_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("REDIS_URL", raising=False)

    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def make_token(sub: str = "user-1", **claims: object) -> str:
    return jwt.encode({"sub": sub, **claims}, os.environ["SECRET_KEY"], algorithm="HS256")


@pytest.fixture
def auth_headers() -> dict[str, str]:
    token = make_token(email="alice@example.com")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers() -> dict[str, str]:
    token = make_token(sub="user-2", email="bob@example.com")
    return {"Authorization": f"Bearer {token}"}
