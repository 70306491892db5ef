import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column, Integer, String, Text, Date, DateTime, JSON, ForeignKey, Index, CheckConstraint, text,
)
from database import Base


class BossFight(Base):
    __tablename__ = "boss_fights"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    month_start = Column(Date, nullable=False)
    project_text = Column(Text, nullable=False)
    completion_criteria = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="active")  # active/defeated/failed
    progress = Column(Integer, nullable=False, default=0)  # 0-100
    learnings = Column(Text, nullable=True)
    loot_acquired = Column(JSON, nullable=False, default=list)
    xp_gained = Column(Integer, nullable=False, default=0)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        CheckConstraint("progress >= 0 AND progress <= 100", name="ck_boss_fights_progress_range"),
        # One active fight per user
        Index(
            "uq_boss_fights_one_active",
            "user_id",
            unique=True,
            sqlite_where=text("status = 'active'"),
            postgresql_where=text("status = 'active'"),
        ),
    )
