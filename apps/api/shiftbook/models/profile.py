import uuid
from sqlalchemy import Column, String, DateTime, Uuid
from sqlalchemy.sql import func

from shiftbook.core.database import Base

class Profile(Base):
    __tablename__ = "profiles"

    profile_id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    email = Column(String, nullable=False, unique=True, index=True)
    full_name = Column(String, nullable=True)
    role = Column(String, nullable=True)  # NULL means worker

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
