import uuid

from sqlalchemy import JSON, Column, DateTime, String, Text, Uuid
from sqlalchemy.sql import func

from app.db import Base


class Activity(Base):
    __tablename__ = "activities"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String(128), nullable=False, index=True)
    action = Column(String(64), nullable=False)
    details = Column(JSON, nullable=True)
    user_agent = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
