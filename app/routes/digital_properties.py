from typing import Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Path, Query, Request
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.trackers import DigitalProperty
from app.models.user import User
from app.routes.auth import get_current_user
from app.schemas.tracker_schemas import (
    DigitalPropertyCreate,
    DigitalPropertyItem,
    PropertyType,
)
from app.services.activity_logger import log_activity

router = APIRouter(prefix="/digital-properties", tags=["Digital Properties"])


@router.get("/")
def list_properties(
    type: Optional[PropertyType] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(DigitalProperty).filter(DigitalProperty.user_id == current_user.id)
    if type is not None:
        query = query.filter(DigitalProperty.type == type.value)

    properties = query.order_by(DigitalProperty.created_at.desc()).all()

    by_type = {t.value: 0 for t in PropertyType}
    for p in properties:
        by_type[p.type] = by_type.get(p.type, 0) + 1

    return {
        "count": len(properties),
        "by_type": by_type,
        "data": [DigitalPropertyItem.model_validate(p) for p in properties],
    }


@router.post("/", response_model=DigitalPropertyItem, status_code=201)
def add_property(
    payload: DigitalPropertyCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    prop = DigitalProperty(
        user_id=current_user.id,
        name=payload.name,
        type=payload.type.value,
        value=payload.value,
        notes=payload.notes,
    )
    db.add(prop)
    db.commit()
    db.refresh(prop)

    background_tasks.add_task(
        log_activity,
        current_user.id,
        "ADDED_DIGITAL_PROPERTY",
        {"name": prop.name, "type": prop.type},
        request.headers.get("user-agent"),
    )
    return prop


@router.delete("/{property_id}")
def delete_property(
    request: Request,
    background_tasks: BackgroundTasks,
    property_id: UUID = Path(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    deleted = (
        db.query(DigitalProperty)
        .filter(DigitalProperty.id == property_id, DigitalProperty.user_id == current_user.id)
        .delete(synchronize_session=False)
    )

    if deleted == 0:
        raise HTTPException(status_code=404, detail="Property not found")

    db.commit()

    background_tasks.add_task(
        log_activity,
        current_user.id,
        "DELETED_DIGITAL_PROPERTY",
        {"propertyId": str(property_id)},
        request.headers.get("user-agent"),
    )
    return {"status": "digital_property_deleted"}
