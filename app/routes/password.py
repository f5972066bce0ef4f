import logging
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Path, Query, Request
from sqlalchemy.orm import Session

from app.core.limits import Limit, get_global_limit
from app.db import get_db
from app.dependencies.rate_limit import require_scan_quota
from app.models.security_checks import PasswordCheck
from app.models.user import User
from app.routes.auth import get_current_user
from app.schemas.assessments import PasswordAssessment
from app.schemas.security_schemas import (
    GeneratedPasswordResponse,
    PasswordCheckItem,
    PasswordCheckRequest,
)
from app.services.activity_logger import log_activity
from app.services.breach.manager import check_password_breach
from app.services.password_strength import assess_password, generate_password

router = APIRouter(prefix="/password", tags=["Password Checker"])
logger = logging.getLogger(__name__)


@router.post("/check", response_model=PasswordAssessment)
def check_password(
    payload: PasswordCheckRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(
        require_scan_quota("rate:password:user", Limit.PASSWORD_CHECK_RATE_LIMIT_USER)
    ),
):
    breach = check_password_breach(payload.password)
    result = assess_password(payload.password, breach)

    try:
        db.add(
            PasswordCheck(
                user_id=current_user.id,
                website=(payload.website or "").strip() or "Manual Check",
                username=(payload.username or "").strip() or "N/A",
                strength=result.strength.value,
                is_breached=result.is_breached,
                breach_count=result.breach_count,
            )
        )
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Failed to save password check user_id=%s", current_user.id)

    background_tasks.add_task(
        log_activity,
        current_user.id,
        "CHECKED_PASSWORD",
        {
            "strength": result.strength.value,
            "isBreached": result.is_breached,
            "breachCount": result.breach_count,
        },
        request.headers.get("user-agent"),
    )

    return result


@router.get("/generate", response_model=GeneratedPasswordResponse)
def generate(
    length: int = Query(
        16,
        ge=get_global_limit(Limit.PASSWORD_GENERATOR_MIN_LENGTH),
        le=get_global_limit(Limit.PASSWORD_GENERATOR_MAX_LENGTH),
    ),
    current_user: User = Depends(get_current_user),
):
    return GeneratedPasswordResponse(password=generate_password(length), length=length)


@router.get("/history")
def password_history(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    checks = (
        db.query(PasswordCheck)
        .filter(PasswordCheck.user_id == current_user.id)
        .order_by(PasswordCheck.last_checked.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )

    return {
        "count": len(checks),
        "strong": sum(1 for c in checks if c.strength == "strong"),
        "weak": sum(1 for c in checks if c.strength == "weak"),
        "breached": sum(1 for c in checks if c.is_breached),
        "data": [PasswordCheckItem.model_validate(c) for c in checks],
    }


@router.delete("/history/{check_id}")
def delete_password_check(
    request: Request,
    background_tasks: BackgroundTasks,
    check_id: UUID = Path(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    deleted = (
        db.query(PasswordCheck)
        .filter(PasswordCheck.id == check_id, PasswordCheck.user_id == current_user.id)
        .delete(synchronize_session=False)
    )

    if deleted == 0:
        raise HTTPException(status_code=404, detail="Password check not found")

    db.commit()

    background_tasks.add_task(
        log_activity,
        current_user.id,
        "DELETED_PASSWORD_CHECK",
        {"checkId": str(check_id)},
        request.headers.get("user-agent"),
    )

    return {"status": "password_check_deleted"}
