import hashlib
import logging

import requests
from redis.exceptions import RedisError

from app.core.limits import Limit, get_global_limit
from app.services.breach.base import BreachLookupError, BreachProvider
from app.services.redis_store import get_json, redis_configured, set_json

logger = logging.getLogger(__name__)

HIBP_PASSWORD_API = "https://api.pwnedpasswords.com/range"
USER_AGENT = "MySpace-Security-App"

PREFIX_LENGTH = 5


def sha1_hex(password: str) -> str:
    return hashlib.sha1(password.encode("utf-8")).hexdigest().upper()


def split_hash(digest: str) -> tuple[str, str]:
    return digest[:PREFIX_LENGTH], digest[PREFIX_LENGTH:]


def parse_range_body(body: str, suffix: str) -> int:
    """
    Scan `SUFFIX:COUNT` lines for an exact suffix match.
    Returns the count, or 0 when the suffix is absent.
    """
    wanted = suffix.upper()

    for line in body.splitlines():
        line = line.strip()
        if not line:
            continue

        hash_suffix, sep, count = line.partition(":")
        if not sep:
            raise BreachLookupError("Malformed range line")

        if hash_suffix.strip().upper() != wanted:
            continue

        try:
            return int(count.strip())
        except ValueError as exc:
            raise BreachLookupError("Malformed breach count") from exc

    return 0


class PwnedPasswordsProvider(BreachProvider):
    """
    Pwned Passwords range API (no key required).
    """

    def __init__(self, timeout: int | None = None):
        self.timeout = timeout or get_global_limit(Limit.EXTERNAL_TIMEOUT_SECONDS)
        self.headers = {"user-agent": USER_AGENT}

    # ==================================================
    # RANGE FETCH (PREFIX ONLY)
    # ==================================================
    def fetch_range(self, prefix: str) -> str:
        cached = self._cached_range(prefix)
        if cached is not None:
            return cached

        try:
            resp = requests.get(
                f"{HIBP_PASSWORD_API}/{prefix}",
                headers=self.headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise BreachLookupError("Password breach service unreachable") from exc

        if resp.status_code != 200:
            raise BreachLookupError(
                f"Password breach service unavailable (status {resp.status_code})"
            )

        body = resp.text
        self._store_range(prefix, body)
        return body

    def _cached_range(self, prefix: str) -> str | None:
        if not redis_configured():
            return None
        try:
            cached = get_json("cache:breach:range", prefix)
        except (RedisError, ValueError):
            logger.warning("Breach range cache read failed")
            return None
        if not cached:
            return None
        return cached.get("body")

    def _store_range(self, prefix: str, body: str) -> None:
        if not redis_configured():
            return
        try:
            ttl = get_global_limit(Limit.BREACH_RANGE_CACHE_TTL_SECONDS)
            set_json("cache:breach:range", {"body": body}, ttl, prefix)
        except RedisError:
            logger.warning("Breach range cache write failed")

    # ==================================================
    # PASSWORD BREACH CHECK (K-ANONYMITY)
    # ==================================================
    def check_password(self, password: str) -> dict:
        prefix, suffix = split_hash(sha1_hex(password))
        count = parse_range_body(self.fetch_range(prefix), suffix)

        return {
            "is_breached": count > 0,
            "breach_count": count,
        }
