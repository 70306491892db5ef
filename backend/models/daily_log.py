import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Boolean, JSON, ForeignKey, UniqueConstraint
from database import Base


class DailyLog(Base):
    __tablename__ = "daily_logs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    date = Column(Date, nullable=False)
    direction = Column(String(10), nullable=True)  # vision/hate
    comment = Column(Text, nullable=True)
    levers_completed = Column(JSON, nullable=False, default=list)  # lever ids, no repeats
    lever_credits = Column(JSON, nullable=False, default=dict)  # lever id -> XP credited when checked
    xp_gained = Column(Integer, nullable=False, default=0)  # running sum of applied deltas
    direction_rewarded = Column(Boolean, nullable=False, default=False)  # vision bonus already paid today
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_dailylog_user_date"),
    )
    __mapper_args__ = {"version_id_col": version}
