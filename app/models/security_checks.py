import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    Uuid,
    text,
)
from sqlalchemy.sql import func

from app.db import Base


class PasswordCheck(Base):
    """
    Outcome of a password check. The password itself is never stored.
    """

    __tablename__ = "password_checks"
    __table_args__ = (
        Index("ix_password_checks_user_id_last_checked", "user_id", "last_checked"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String(128), nullable=False, index=True)
    website = Column(String(255), nullable=False)
    username = Column(String(255), nullable=False)
    strength = Column(String(16), nullable=False)
    is_breached = Column(Boolean, nullable=False, server_default=text("false"))
    breach_count = Column(Integer, nullable=False, server_default=text("0"))
    last_checked = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class PhishingScan(Base):
    __tablename__ = "phishing_scans"
    __table_args__ = (
        Index("ix_phishing_scans_user_id_scanned_at", "user_id", "scanned_at"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String(128), nullable=False, index=True)
    url = Column(Text, nullable=False)
    safe = Column(Boolean, nullable=False)
    risk_level = Column(String(16), nullable=False)
    threat_types = Column(JSON, nullable=False, default=list)
    google_safe = Column(Boolean, nullable=False, server_default=text("true"))
    domain_reputation = Column(String(16), nullable=False, server_default="high")
    risk_score = Column(Integer, nullable=False, server_default=text("0"))
    details = Column(Text, nullable=True)
    scanned_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
