from __future__ import annotations

import pytest

from app.models.activity import Activity
from app.services.activity_logger import clean_details, log_activity


@pytest.mark.parametrize(
    ("details", "expected"),
    [
        (None, None),
        ({}, None),
        ({"a": None}, None),
        ({"a": 1, "b": None, "c": "x"}, {"a": 1, "c": "x"}),
        ("plain", "plain"),
        (7, 7),
        (True, True),
        (["not", "storable"], None),
        (object(), None),
    ],
)
def test_clean_details(details, expected) -> None:
    assert clean_details(details) == expected


def test_log_activity_persists_row(db_session) -> None:
    log_activity("user-1", "SCANNED_URL", {"url": "https://example.com", "risk": None}, "pytest-agent")

    rows = db_session.query(Activity).filter(Activity.user_id == "user-1").all()
    assert len(rows) == 1
    assert rows[0].action == "SCANNED_URL"
    assert rows[0].details == {"url": "https://example.com"}
    assert rows[0].user_agent == "pytest-agent"


def test_log_activity_never_raises_when_session_cannot_open() -> None:
    def broken_factory():
        raise RuntimeError("database unavailable")

    log_activity("user-1", "CHECKED_PASSWORD", session_factory=broken_factory)


def test_log_activity_rolls_back_failed_commit() -> None:
    class FailingSession:
        def __init__(self) -> None:
            self.rolled_back = False
            self.closed = False

        def add(self, obj) -> None:
            pass

        def commit(self) -> None:
            raise RuntimeError("constraint violated")

        def rollback(self) -> None:
            self.rolled_back = True

        def close(self) -> None:
            self.closed = True

    session = FailingSession()

    log_activity("user-1", "CHECKED_PASSWORD", session_factory=lambda: session)

    assert session.rolled_back is True
    assert session.closed is True
