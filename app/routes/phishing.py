import logging
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Path, Query, Request
from sqlalchemy.orm import Session

from app.core.limits import Limit
from app.db import get_db
from app.dependencies.rate_limit import require_scan_quota
from app.models.security_checks import PhishingScan
from app.models.user import User
from app.routes.auth import get_current_user
from app.schemas.assessments import UrlRiskAssessment
from app.schemas.security_schemas import (
    PhishingHistoryResponse,
    PhishingScanItem,
    UrlScanRequest,
)
from app.services.activity_logger import log_activity
from app.services.phishing.pipeline import scan_url

router = APIRouter(prefix="/phishing", tags=["Phishing Scanner"])
logger = logging.getLogger(__name__)


@router.post("/scan", response_model=UrlRiskAssessment)
def scan(
    payload: UrlScanRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(
        require_scan_quota("rate:url:user", Limit.URL_SCAN_RATE_LIMIT_USER)
    ),
):
    url = payload.url.strip()
    if not url:
        raise HTTPException(status_code=400, detail="URL is required")

    result = scan_url(url)

    logger.info(
        "url_scanned user_id=%s safe=%s risk_level=%s",
        current_user.id,
        result.safe,
        result.risk_level.value,
    )

    try:
        db.add(
            PhishingScan(
                user_id=current_user.id,
                url=url,
                safe=result.safe,
                risk_level=result.risk_level.value,
                threat_types=list(result.threat_types),
                google_safe=result.google_safe,
                domain_reputation=result.domain_reputation.value,
                risk_score=result.risk_score,
                details=result.details,
            )
        )
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Failed to save phishing scan user_id=%s", current_user.id)

    background_tasks.add_task(
        log_activity,
        current_user.id,
        "SCANNED_URL",
        {
            "url": url,
            "safe": result.safe,
            "riskLevel": result.risk_level.value,
        },
        request.headers.get("user-agent"),
    )

    return result


@router.get("/history", response_model=PhishingHistoryResponse)
def phishing_history(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(PhishingScan).filter(PhishingScan.user_id == current_user.id)

    total = query.count()
    safe = query.filter(PhishingScan.safe.is_(True)).count()

    scans = (
        query.order_by(PhishingScan.scanned_at.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )

    return PhishingHistoryResponse(
        total=total,
        safe=safe,
        unsafe=total - safe,
        data=[PhishingScanItem.model_validate(s) for s in scans],
    )


@router.delete("/history/{scan_id}")
def delete_phishing_scan(
    request: Request,
    background_tasks: BackgroundTasks,
    scan_id: UUID = Path(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    deleted = (
        db.query(PhishingScan)
        .filter(PhishingScan.id == scan_id, PhishingScan.user_id == current_user.id)
        .delete(synchronize_session=False)
    )

    if deleted == 0:
        raise HTTPException(status_code=404, detail="Phishing scan not found")

    db.commit()

    background_tasks.add_task(
        log_activity,
        current_user.id,
        "DELETED_PHISHING_SCAN",
        {"scanId": str(scan_id)},
        request.headers.get("user-agent"),
    )

    return {"status": "phishing_scan_deleted"}
