from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.activity import Activity
from app.models.user import User
from app.routes.auth import get_current_user
from app.schemas.tracker_schemas import ActivityItem

router = APIRouter(prefix="/activity", tags=["Activity"])


@router.get("/")
def list_activity(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    action: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Activity).filter(Activity.user_id == current_user.id)

    if action:
        query = query.filter(Activity.action == action)

    logs = (
        query.order_by(Activity.created_at.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )

    return {
        "count": len(logs),
        "data": [ActivityItem.model_validate(log) for log in logs],
    }


@router.delete("/{activity_id}")
def delete_activity(
    activity_id: UUID = Path(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    deleted = (
        db.query(Activity)
        .filter(Activity.id == activity_id, Activity.user_id == current_user.id)
        .delete(synchronize_session=False)
    )

    if deleted == 0:
        raise HTTPException(status_code=404, detail="Activity not found")

    db.commit()
    return {"status": "activity_deleted"}
