import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Boolean, ForeignKey, UniqueConstraint
from database import Base


class WeeklyReflection(Base):
    __tablename__ = "weekly_reflections"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    week_start = Column(Date, nullable=False)  # Monday
    most_alive = Column(Text, nullable=True)
    most_dead = Column(Text, nullable=True)
    pattern_noticed = Column(Text, nullable=True)
    blocking_progress = Column(Text, nullable=True)
    anti_vision_check = Column(Boolean, nullable=True)  # anti-vision still resonates
    levers_adjusted = Column(Boolean, nullable=True)
    project_progress = Column(Integer, nullable=True)  # 0-100
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("user_id", "week_start", name="uq_weekly_reflection_user_week"),
    )
