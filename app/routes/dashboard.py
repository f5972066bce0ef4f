from fastapi import APIRouter, Depends
from pydantic import BaseModel
from datetime import datetime
from typing import List

from sqlalchemy.orm import Session

from app.db import get_db
from app.models.activity import Activity
from app.models.security_checks import PasswordCheck, PhishingScan
from app.models.trackers import DigitalProperty, ScreenTimeEntry, Subscription, Todo
from app.models.user import User
from app.routes.auth import get_current_user
from app.services.trackers import security_score


router = APIRouter(prefix="/dashboard", tags=["Dashboard"])

RECENT_ACTIVITY_LIMIT = 5
WEEK_DAYS = 7


# ---------------------------
# Response Schemas
# ---------------------------

class RecentActivity(BaseModel):
    action: str
    created_at: datetime


class DashboardSummary(BaseModel):
    total_tasks: int
    completed_tasks: int
    total_accounts: int
    total_subscriptions: int
    active_subscriptions: int
    weekly_screen_time: float
    password_checks: int
    total_breaches: int
    phishing_scans: int
    security_score: int
    recent_activity: List[RecentActivity]


# ---------------------------
# Routes
# ---------------------------

@router.get("/summary", response_model=DashboardSummary)
def dashboard_summary(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    uid = current_user.id

    todos = db.query(Todo).filter(Todo.user_id == uid)
    subs = db.query(Subscription).filter(Subscription.user_id == uid)
    checks = db.query(PasswordCheck).filter(PasswordCheck.user_id == uid)

    last_week = (
        db.query(ScreenTimeEntry.hours)
        .filter(ScreenTimeEntry.user_id == uid)
        .order_by(ScreenTimeEntry.entry_date.desc())
        .limit(WEEK_DAYS)
        .all()
    )

    password_checks = checks.count()
    breaches = checks.filter(PasswordCheck.is_breached.is_(True)).count()

    recent = (
        db.query(Activity)
        .filter(Activity.user_id == uid)
        .order_by(Activity.created_at.desc())
        .limit(RECENT_ACTIVITY_LIMIT)
        .all()
    )

    return DashboardSummary(
        total_tasks=todos.count(),
        completed_tasks=todos.filter(Todo.completed.is_(True)).count(),
        total_accounts=db.query(DigitalProperty).filter(DigitalProperty.user_id == uid).count(),
        total_subscriptions=subs.count(),
        active_subscriptions=subs.filter(Subscription.active.is_(True)).count(),
        weekly_screen_time=round(sum(row.hours or 0 for row in last_week), 1),
        password_checks=password_checks,
        total_breaches=breaches,
        phishing_scans=db.query(PhishingScan).filter(PhishingScan.user_id == uid).count(),
        security_score=security_score(password_checks, breaches),
        recent_activity=[
            RecentActivity(action=a.action, created_at=a.created_at) for a in recent
        ],
    )
