from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Path, Query, Request
from sqlalchemy.orm import Session

from app.core.limits import Limit, get_global_limit
from app.db import get_db
from app.models.trackers import ScreenTimeEntry
from app.models.user import User
from app.routes.auth import get_current_user
from app.schemas.tracker_schemas import ScreenTimeCreate, ScreenTimeItem, ScreenTimeStats
from app.services.activity_logger import log_activity
from app.services.trackers import screen_time_stats

router = APIRouter(prefix="/screen-time", tags=["Screen Time"])


def _recent_entries(db: Session, user: User, limit: int) -> list[ScreenTimeEntry]:
    return (
        db.query(ScreenTimeEntry)
        .filter(ScreenTimeEntry.user_id == user.id)
        .order_by(ScreenTimeEntry.entry_date.desc(), ScreenTimeEntry.created_at.desc())
        .limit(limit)
        .all()
    )


@router.post("/", response_model=ScreenTimeItem, status_code=201)
def add_screen_time(
    payload: ScreenTimeCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entry = ScreenTimeEntry(
        user_id=current_user.id,
        entry_date=payload.entry_date,
        hours=round(payload.hours, 2),
        apps=[app.model_dump() for app in payload.apps],
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)

    background_tasks.add_task(
        log_activity,
        current_user.id,
        "LOGGED_SCREEN_TIME",
        {"hours": entry.hours, "date": entry.entry_date.isoformat()},
        request.headers.get("user-agent"),
    )
    return entry


@router.get("/")
def screen_time_history(
    limit: int = Query(get_global_limit(Limit.SCREEN_TIME_HISTORY_DEFAULT), ge=1, le=365),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entries = _recent_entries(db, current_user, limit)
    return {
        "count": len(entries),
        "data": [ScreenTimeItem.model_validate(e) for e in entries],
    }


@router.get("/stats", response_model=ScreenTimeStats)
def get_screen_time_stats(
    daily_limit: float = Query(
        get_global_limit(Limit.DEFAULT_DAILY_SCREEN_LIMIT_HOURS), gt=0, le=24
    ),
    limit: int = Query(get_global_limit(Limit.SCREEN_TIME_HISTORY_DEFAULT), ge=1, le=365),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entries = _recent_entries(db, current_user, limit)
    return screen_time_stats(entries, daily_limit)


@router.delete("/{entry_id}")
def delete_screen_time(
    request: Request,
    background_tasks: BackgroundTasks,
    entry_id: UUID = Path(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    deleted = (
        db.query(ScreenTimeEntry)
        .filter(ScreenTimeEntry.id == entry_id, ScreenTimeEntry.user_id == current_user.id)
        .delete(synchronize_session=False)
    )

    if deleted == 0:
        raise HTTPException(status_code=404, detail="Screen time entry not found")

    db.commit()

    background_tasks.add_task(
        log_activity,
        current_user.id,
        "DELETED_SCREEN_TIME",
        {"entryId": str(entry_id)},
        request.headers.get("user-agent"),
    )
    return {"status": "screen_time_deleted"}
