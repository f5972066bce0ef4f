import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    String,
    Text,
    Uuid,
    text,
)
from sqlalchemy.sql import func

from app.db import Base


class Todo(Base):
    __tablename__ = "todos"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String(128), nullable=False, index=True)
    title = Column(String(500), nullable=False)
    completed = Column(Boolean, nullable=False, server_default=text("false"))
    priority = Column(String(16), nullable=False, server_default="medium")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class DigitalProperty(Base):
    __tablename__ = "digital_properties"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String(128), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    type = Column(String(32), nullable=False)
    value = Column(Text, nullable=False, server_default="")
    notes = Column(Text, nullable=False, server_default="")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String(128), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    price = Column(Float, nullable=False, server_default=text("0"))
    currency = Column(String(8), nullable=False, server_default="USD")
    renew_date = Column(Date, nullable=True)
    active = Column(Boolean, nullable=False, server_default=text("true"))
    category = Column(String(64), nullable=False, server_default="")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class ScreenTimeEntry(Base):
    __tablename__ = "screen_time_entries"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String(128), nullable=False, index=True)
    entry_date = Column(Date, nullable=False)
    hours = Column(Float, nullable=False)
    # [{"name": str, "time": float}]
    apps = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
