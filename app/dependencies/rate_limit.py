from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Request
from redis.exceptions import RedisError

from app.core.limits import Limit, get_global_limit
from app.models.user import User
from app.routes.auth import get_current_user
from app.services.redis_store import allow_sliding_window, redis_configured

logger = logging.getLogger(__name__)


def rate_limit_error(message: str):
    raise HTTPException(
        status_code=429,
        detail={
            "error": {
                "code": "RATE_LIMIT",
                "message": message,
            }
        },
    )


def require_scan_quota(namespace: str, limit: Limit):
    """
    Per-user sliding window for the external-service backed checks.
    Without Redis, or when Redis misbehaves, requests are let through.
    """

    def _dependency(
        request: Request,
        current_user: User = Depends(get_current_user),
    ) -> User:
        if not redis_configured():
            return current_user

        try:
            allowed = allow_sliding_window(
                namespace,
                get_global_limit(limit),
                get_global_limit(Limit.SCAN_RATE_WINDOW_SECONDS),
                current_user.id,
            )
        except RedisError:
            logger.warning(
                "scan_rate_limiter_unavailable user_id=%s path=%s",
                current_user.id,
                request.url.path,
            )
            return current_user

        if not allowed:
            logger.warning(
                "scan_rate_limited user_id=%s path=%s",
                current_user.id,
                request.url.path,
            )
            rate_limit_error("Too many checks. Please try again later.")

        return current_user

    return _dependency
