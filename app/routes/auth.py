from fastapi import APIRouter, HTTPException, Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from datetime import datetime, timezone
import logging
import os

from sqlalchemy.orm import Session

from app.db import get_db
from app.models.user import User

router = APIRouter(prefix="/auth", tags=["Auth"])
logger = logging.getLogger(__name__)

# Tokens are issued by the external identity provider; this service only
# verifies them.
SECRET_KEY = os.getenv("SECRET_KEY")

if not SECRET_KEY:
    raise RuntimeError("SECRET_KEY not set in environment")

ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

security = HTTPBearer(auto_error=False)


# ---------------- PROFILE PROVISIONING ----------------
def _default_display_name(claims: dict) -> str | None:
    name = claims.get("name")
    if name:
        return name
    email = claims.get("email")
    if email:
        return email.split("@")[0]
    return None


def init_user_profile(db: Session, claims: dict) -> User:
    """
    First sight of a subject creates the profile; later sights only
    refresh last_login.
    """
    user_id = str(claims["sub"])
    now = datetime.now(tz=timezone.utc)

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        user = User(
            id=user_id,
            display_name=_default_display_name(claims),
            email=claims.get("email"),
            photo_url=claims.get("picture") or "",
            created_at=now,
            last_login=now,
        )
        logger.info("user_profile_created user_id=%s", user_id)
    else:
        user.last_login = now

    db.add(user)
    db.commit()
    db.refresh(user)
    return user


# ---------------- AUTH DEPENDENCY ----------------
def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Invalid token")

    try:
        claims = jwt.decode(credentials.credentials, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")

    if not claims.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid token")

    user = init_user_profile(db, claims)
    request.state.user = user
    return user


# ---------------- ROUTES ----------------
@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    return {
        "id": current_user.id,
        "display_name": current_user.display_name,
        "email": current_user.email,
        "photo_url": current_user.photo_url,
        "created_at": current_user.created_at,
        "last_login": current_user.last_login,
    }
