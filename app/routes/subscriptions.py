from typing import Literal
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Path, Query, Request
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.trackers import Subscription
from app.models.user import User
from app.routes.auth import get_current_user
from app.schemas.tracker_schemas import (
    SubscriptionCreate,
    SubscriptionItem,
    SubscriptionUpdate,
    UpcomingRenewal,
)
from app.services.activity_logger import log_activity
from app.services.trackers import upcoming_renewals

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])

NULLABLE_FIELDS = {"renew_date"}


def _get_owned_subscription(db: Session, subscription_id: UUID, user: User) -> Subscription:
    sub = (
        db.query(Subscription)
        .filter(Subscription.id == subscription_id, Subscription.user_id == user.id)
        .first()
    )
    if not sub:
        raise HTTPException(status_code=404, detail="Subscription not found")
    return sub


@router.get("/")
def list_subscriptions(
    status: Literal["all", "active", "inactive"] = Query("all"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Subscription).filter(Subscription.user_id == current_user.id)
    if status == "active":
        query = query.filter(Subscription.active.is_(True))
    elif status == "inactive":
        query = query.filter(Subscription.active.is_(False))

    subs = query.order_by(Subscription.name.asc()).all()

    return {
        "count": len(subs),
        "active": sum(1 for s in subs if s.active),
        "data": [SubscriptionItem.model_validate(s) for s in subs],
    }


@router.get("/upcoming", response_model=list[UpcomingRenewal])
def list_upcoming_renewals(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    subs = db.query(Subscription).filter(Subscription.user_id == current_user.id).all()
    return upcoming_renewals(subs)


@router.post("/", response_model=SubscriptionItem, status_code=201)
def add_subscription(
    payload: SubscriptionCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    sub = Subscription(user_id=current_user.id, **payload.model_dump())
    db.add(sub)
    db.commit()
    db.refresh(sub)

    background_tasks.add_task(
        log_activity,
        current_user.id,
        "ADDED_SUBSCRIPTION",
        {"name": sub.name, "price": sub.price, "currency": sub.currency},
        request.headers.get("user-agent"),
    )
    return sub


@router.patch("/{subscription_id}", response_model=SubscriptionItem)
def update_subscription(
    payload: SubscriptionUpdate,
    request: Request,
    background_tasks: BackgroundTasks,
    subscription_id: UUID = Path(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    sub = _get_owned_subscription(db, subscription_id, current_user)

    # renew_date may be cleared with an explicit null; other columns are NOT NULL.
    updates = payload.model_dump(exclude_unset=True)
    for field, value in updates.items():
        if value is None and field not in NULLABLE_FIELDS:
            continue
        setattr(sub, field, value)

    db.add(sub)
    db.commit()
    db.refresh(sub)

    background_tasks.add_task(
        log_activity,
        current_user.id,
        "UPDATED_SUBSCRIPTION",
        {"subscriptionId": str(sub.id), "active": sub.active},
        request.headers.get("user-agent"),
    )
    return sub


@router.delete("/{subscription_id}")
def delete_subscription(
    request: Request,
    background_tasks: BackgroundTasks,
    subscription_id: UUID = Path(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    sub = _get_owned_subscription(db, subscription_id, current_user)
    db.delete(sub)
    db.commit()

    background_tasks.add_task(
        log_activity,
        current_user.id,
        "DELETED_SUBSCRIPTION",
        {"subscriptionId": str(subscription_id)},
        request.headers.get("user-agent"),
    )
    return {"status": "subscription_deleted"}
