import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey
from database import Base


class DailyLever(Base):
    __tablename__ = "daily_levers"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    lever_text = Column(Text, nullable=False)
    xp_value = Column(Integer, nullable=False, default=50)
    order = Column(Integer, nullable=False, default=0)  # display order, gaps and repeats allowed
    active = Column(Boolean, nullable=False, default=True)  # False = soft-deleted
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
