from __future__ import annotations

from datetime import date
from typing import Any, Iterable

PRIORITY_ORDER = {
    "high": 3,
    "medium": 2,
    "low": 1,
}

SECURITY_SCORE_FLOOR = 50


# =========================================================
# TODOS
# =========================================================

def sort_todos(todos: Iterable[Any], sort_by: str = "date") -> list[Any]:
    todos = list(todos)
    if sort_by == "priority":
        return sorted(todos, key=lambda t: PRIORITY_ORDER.get(t.priority, 0), reverse=True)
    if sort_by == "title":
        return sorted(todos, key=lambda t: t.title.lower())
    return sorted(todos, key=lambda t: t.created_at, reverse=True)


# =========================================================
# SUBSCRIPTIONS
# =========================================================

def days_until_renewal(renew_date: date, today: date | None = None) -> int:
    today = today or date.today()
    return (renew_date - today).days


def upcoming_renewals(subscriptions: Iterable[Any], today: date | None = None) -> list[dict]:
    today = today or date.today()
    active = [s for s in subscriptions if s.active and s.renew_date]
    active.sort(key=lambda s: s.renew_date)

    upcoming = []
    for sub in active:
        days = days_until_renewal(sub.renew_date, today)
        upcoming.append({
            "id": sub.id,
            "name": sub.name,
            "price": sub.price,
            "currency": sub.currency,
            "renew_date": sub.renew_date,
            "category": sub.category,
            "active": sub.active,
            "days_until_renewal": days,
            "overdue": days < 0,
        })
    return upcoming


# =========================================================
# SCREEN TIME
# =========================================================

def screen_time_stats(entries: list[Any], daily_limit: float) -> dict:
    """
    `entries` are expected newest first.
    """
    if not entries:
        return {
            "days_tracked": 0,
            "average_hours": 0.0,
            "last_7_days_hours": 0.0,
            "days_within_limit": 0,
            "daily_limit_hours": daily_limit,
            "top_app": None,
        }

    total = sum(e.hours for e in entries)

    app_usage: dict[str, float] = {}
    for entry in entries:
        for app in entry.apps or []:
            name = app.get("name")
            if not name:
                continue
            app_usage[name] = app_usage.get(name, 0.0) + float(app.get("time") or 0)

    top_app = max(app_usage, key=app_usage.get) if app_usage else None

    return {
        "days_tracked": len(entries),
        "average_hours": round(total / len(entries), 2),
        "last_7_days_hours": round(sum(e.hours for e in entries[:7]), 1),
        "days_within_limit": sum(1 for e in entries if e.hours <= daily_limit),
        "daily_limit_hours": daily_limit,
        "top_app": top_app,
    }


# =========================================================
# DASHBOARD
# =========================================================

def security_score(password_checks: int, breaches: int) -> int:
    clean = password_checks - breaches
    return max(100 - (breaches * 10) - (clean * 2), SECURITY_SCORE_FLOOR)
