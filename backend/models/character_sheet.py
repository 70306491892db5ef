import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime, ForeignKey
from database import Base


class CharacterSheet(Base):
    __tablename__ = "character_sheet"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, unique=True)
    anti_vision = Column(Text, nullable=True)  # the life you refuse to live
    vision = Column(Text, nullable=True)
    year_goal = Column(Text, nullable=True)
    month_project = Column(Text, nullable=True)
    constraints = Column(Text, nullable=True)
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
