from __future__ import annotations

import hashlib
import json
import os
import time
import uuid
from typing import Any

from redis import Redis

KEY_PREFIX = "myspace"

_redis_client: Redis | None = None


def redis_configured() -> bool:
    return bool(os.getenv("REDIS_URL"))


def _require_redis_url() -> str:
    redis_url = os.getenv("REDIS_URL")
    if not redis_url:
        raise RuntimeError("REDIS_URL not set")
    return redis_url


def get_redis() -> Redis:
    global _redis_client
    if _redis_client is None:
        _redis_client = Redis.from_url(
            _require_redis_url(),
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
    return _redis_client


def build_hashed_key(namespace: str, *parts: Any) -> str:
    # Callers pass user ids and hash prefixes; only a digest reaches Redis.
    material = "\x1f".join(str(part) for part in parts)
    return f"{KEY_PREFIX}:{namespace}:{hashlib.sha256(material.encode('utf-8')).hexdigest()}"


def allow_sliding_window(
    namespace: str,
    limit: int,
    window_seconds: int,
    *parts: Any,
) -> bool:
    """
    Record one hit for `parts` and report whether it fits in the last
    `window_seconds`. A rejected hit is withdrawn so it does not extend
    the lockout.
    """
    client = get_redis()
    key = build_hashed_key(namespace, *parts)
    now_ms = int(time.time() * 1000)
    member = f"{now_ms}:{uuid.uuid4().hex}"

    pipe = client.pipeline()
    pipe.zremrangebyscore(key, 0, now_ms - window_seconds * 1000)
    pipe.zadd(key, {member: now_ms})
    pipe.zcard(key)
    pipe.expire(key, window_seconds + 5)
    _, _, hits, _ = pipe.execute()

    if int(hits or 0) <= limit:
        return True

    client.zrem(key, member)
    return False


def get_json(namespace: str, *parts: Any) -> dict[str, Any] | None:
    raw = get_redis().get(build_hashed_key(namespace, *parts))
    if not raw:
        return None
    value = json.loads(raw)
    return value if isinstance(value, dict) else None


def set_json(namespace: str, data: dict[str, Any], ttl_seconds: int, *parts: Any) -> None:
    get_redis().setex(build_hashed_key(namespace, *parts), ttl_seconds, json.dumps(data))
