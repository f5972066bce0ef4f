import logging

import requests

from app.schemas.assessments import BreachResult
from app.services.breach.base import BreachLookupError, BreachProvider
from app.services.breach.hibp_provider import PwnedPasswordsProvider

logger = logging.getLogger(__name__)

UNABLE_TO_CHECK = "Unable to check breaches"


def get_breach_provider() -> BreachProvider:
    """
    Returns a new provider instance per request.
    """
    return PwnedPasswordsProvider()


def check_password_breach(
    password: str,
    provider: BreachProvider | None = None,
) -> BreachResult:
    """
    Never raises. An unavailable service reads as "not breached" with an
    explicit notice; a breach is only reported when the service confirms it.
    """
    provider = provider or get_breach_provider()

    try:
        raw = provider.check_password(password)
    except (BreachLookupError, requests.RequestException, ValueError) as exc:
        logger.warning("password_breach_check_unavailable error=%s", exc)
        return BreachResult(is_breached=False, breach_count=0, details=UNABLE_TO_CHECK)
    except Exception:
        logger.exception("password_breach_check_failed")
        return BreachResult(is_breached=False, breach_count=0, details=UNABLE_TO_CHECK)

    if raw["is_breached"]:
        count = int(raw["breach_count"])
        return BreachResult(
            is_breached=True,
            breach_count=count,
            details=f"Found in {count} data breaches!",
        )

    return BreachResult(is_breached=False, breach_count=0, details="No breaches found")
