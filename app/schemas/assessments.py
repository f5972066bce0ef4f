from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Strength(str, Enum):
    WEAK = "weak"
    MEDIUM = "medium"
    STRONG = "strong"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Reputation(str, Enum):
    """Trustworthiness of a domain, not its risk."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------- PASSWORD ----------------

class PasswordStrength(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=6)
    strength: Strength
    feedback: list[str]


class BreachResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_breached: bool = False
    breach_count: int = Field(default=0, ge=0)
    details: str = ""


class PasswordAssessment(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=6)
    strength: Strength
    feedback: list[str]
    is_breached: bool = False
    breach_count: int = Field(default=0, ge=0)
    breach_details: str = ""


# ---------------- URL ----------------

class LocalScanResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    safe: bool
    risk_level: RiskLevel
    threat_types: list[str]
    details: str


class UrlRiskAssessment(BaseModel):
    model_config = ConfigDict(frozen=True)

    safe: bool = True
    risk_level: RiskLevel = RiskLevel.LOW
    threat_types: list[str] = Field(default_factory=list)
    google_safe: bool = True
    domain_reputation: Reputation = Reputation.HIGH
    risk_score: int = Field(default=0, ge=0, le=100)
    details: str = ""
    timestamp: datetime = Field(default_factory=_utcnow)
