from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func

from app.db import Base


class User(Base):
    __tablename__ = "users"

    # Subject claim issued by the identity provider.
    id = Column(String(128), primary_key=True)

    display_name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True, index=True)
    photo_url = Column(String(1024), nullable=False, default="", server_default="")

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now()
    )

    last_login = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=True,
    )
