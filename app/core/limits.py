from __future__ import annotations

from enum import Enum


class Limit(str, Enum):
    EXTERNAL_TIMEOUT_SECONDS = "EXTERNAL_TIMEOUT_SECONDS"
    SCAN_RATE_WINDOW_SECONDS = "SCAN_RATE_WINDOW_SECONDS"
    PASSWORD_CHECK_RATE_LIMIT_USER = "PASSWORD_CHECK_RATE_LIMIT_USER"
    URL_SCAN_RATE_LIMIT_USER = "URL_SCAN_RATE_LIMIT_USER"
    BREACH_RANGE_CACHE_TTL_SECONDS = "BREACH_RANGE_CACHE_TTL_SECONDS"
    PASSWORD_GENERATOR_MIN_LENGTH = "PASSWORD_GENERATOR_MIN_LENGTH"
    PASSWORD_GENERATOR_MAX_LENGTH = "PASSWORD_GENERATOR_MAX_LENGTH"
    SCREEN_TIME_HISTORY_DEFAULT = "SCREEN_TIME_HISTORY_DEFAULT"
    DEFAULT_DAILY_SCREEN_LIMIT_HOURS = "DEFAULT_DAILY_SCREEN_LIMIT_HOURS"


GLOBAL_LIMITS: dict[Limit, int] = {
    Limit.EXTERNAL_TIMEOUT_SECONDS: 8,
    Limit.SCAN_RATE_WINDOW_SECONDS: 60,
    Limit.PASSWORD_CHECK_RATE_LIMIT_USER: 10,
    Limit.URL_SCAN_RATE_LIMIT_USER: 10,
    Limit.BREACH_RANGE_CACHE_TTL_SECONDS: 3600,
    Limit.PASSWORD_GENERATOR_MIN_LENGTH: 8,
    Limit.PASSWORD_GENERATOR_MAX_LENGTH: 128,
    Limit.SCREEN_TIME_HISTORY_DEFAULT: 30,
    Limit.DEFAULT_DAILY_SCREEN_LIMIT_HOURS: 4,
}


def get_global_limit(limit: Limit | str) -> int:
    resolved = Limit(limit) if isinstance(limit, str) else limit
    return GLOBAL_LIMITS[resolved]
