import logging
from typing import Any

from app.db import SessionLocal
from app.models.activity import Activity

logger = logging.getLogger(__name__)

PRIMITIVE_TYPES = (str, int, float, bool)


def clean_details(details: Any) -> Any:
    """
    Keep only storable detail values.
    Mappings lose their None entries; anything that is neither a mapping
    nor a primitive is dropped.
    """
    if details is None:
        return None

    if isinstance(details, dict):
        cleaned = {key: value for key, value in details.items() if value is not None}
        return cleaned or None

    if isinstance(details, PRIMITIVE_TYPES):
        return details

    return None


def log_activity(
    user_id: str,
    action: str,
    details: Any = None,
    user_agent: str | None = None,
    session_factory=None,
) -> None:
    """
    Fire-and-forget: dispatched as a background task after the response,
    owns its session and never raises.
    """
    db = None
    try:
        db = (session_factory or SessionLocal)()
        db.add(
            Activity(
                user_id=user_id,
                action=action,
                details=clean_details(details),
                user_agent=user_agent,
            )
        )
        db.commit()
    except Exception:
        logger.exception("activity_log_failed user_id=%s action=%s", user_id, action)
        if db is not None:
            db.rollback()
    finally:
        if db is not None:
            db.close()
