from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PropertyType(str, Enum):
    WEBSITE = "website"
    APP = "app"
    SERVICE = "service"
    CRYPTO = "crypto"
    OTHER = "other"


# ---------------- TODOS ----------------

class TodoCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    completed: bool = False
    priority: Priority = Priority.MEDIUM


class TodoUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=500)
    completed: Optional[bool] = None
    priority: Optional[Priority] = None


class TodoItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    completed: bool
    priority: Priority
    created_at: datetime


# ---------------- DIGITAL PROPERTIES ----------------

class DigitalPropertyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    type: PropertyType
    value: str = ""
    notes: str = ""


class DigitalPropertyItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    type: PropertyType
    value: str
    notes: str
    created_at: datetime


# ---------------- SUBSCRIPTIONS ----------------

class SubscriptionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    price: float = Field(default=0, ge=0)
    currency: str = Field(default="USD", min_length=1, max_length=8)
    renew_date: Optional[date] = None
    category: str = ""
    active: bool = True


class SubscriptionUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    price: Optional[float] = Field(default=None, ge=0)
    currency: Optional[str] = Field(default=None, min_length=1, max_length=8)
    renew_date: Optional[date] = None
    category: Optional[str] = None
    active: Optional[bool] = None


class SubscriptionItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    price: float
    currency: str
    renew_date: Optional[date] = None
    category: str
    active: bool


class UpcomingRenewal(SubscriptionItem):
    days_until_renewal: int
    overdue: bool


# ---------------- SCREEN TIME ----------------

class AppUsage(BaseModel):
    name: str = Field(..., min_length=1)
    time: float = Field(..., ge=0)


class ScreenTimeCreate(BaseModel):
    entry_date: date
    hours: float = Field(..., ge=0, le=24)
    apps: List[AppUsage] = Field(default_factory=list)


class ScreenTimeItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    entry_date: date
    hours: float
    apps: List[AppUsage]
    created_at: datetime


class ScreenTimeStats(BaseModel):
    days_tracked: int
    average_hours: float
    last_7_days_hours: float
    days_within_limit: int
    daily_limit_hours: float
    top_app: Optional[str] = None


# ---------------- ACTIVITY ----------------

class ActivityItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    action: str
    details: Optional[Any] = None
    created_at: datetime
