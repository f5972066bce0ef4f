from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.assessments import Reputation, RiskLevel, Strength


class PasswordCheckRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    password: str = Field(..., min_length=1, max_length=1024)
    website: Optional[str] = Field(default=None, max_length=255)
    username: Optional[str] = Field(default=None, max_length=255)


class GeneratedPasswordResponse(BaseModel):
    password: str
    length: int


class PasswordCheckItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    website: str
    username: str
    strength: Strength
    is_breached: bool
    breach_count: int
    last_checked: datetime


class UrlScanRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    url: str = Field(..., min_length=1, max_length=4096)


class PhishingScanItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    url: str
    safe: bool
    risk_level: RiskLevel
    threat_types: List[str]
    google_safe: bool
    domain_reputation: Reputation
    risk_score: int
    details: Optional[str] = None
    scanned_at: datetime


class PhishingHistoryResponse(BaseModel):
    total: int
    safe: int
    unsafe: int
    data: List[PhishingScanItem]
