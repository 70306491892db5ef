"""
reflection_service.py — Weekly reflections (append-only, one per week)
"""

from datetime import date as date_type, datetime, timedelta, timezone

from sqlalchemy.orm import Session

from errors import ConflictError
from models.weekly_reflection import WeeklyReflection

REFLECTION_FIELDS = (
    "most_alive",
    "most_dead",
    "pattern_noticed",
    "blocking_progress",
    "anti_vision_check",
    "levers_adjusted",
    "project_progress",
)


def week_start(d: date_type) -> date_type:
    """Monday of the week containing `d`."""
    return d - timedelta(days=d.weekday())


class WeeklyReflectionService:
    @staticmethod
    def create(db: Session, user_id: str, data: dict, today: date_type | None = None) -> WeeklyReflection:
        start = week_start(today or datetime.now(timezone.utc).date())
        if db.query(WeeklyReflection).filter_by(user_id=user_id, week_start=start).first():
            raise ConflictError("This week's reflection is already done")
        reflection = WeeklyReflection(
            user_id=user_id,
            week_start=start,
            **{k: data.get(k) for k in REFLECTION_FIELDS},
        )
        db.add(reflection)
        db.flush()
        return reflection

    @staticmethod
    def get_all(db: Session, user_id: str, since: datetime | None = None) -> list[WeeklyReflection]:
        query = db.query(WeeklyReflection).filter(WeeklyReflection.user_id == user_id)
        if since:
            query = query.filter(WeeklyReflection.created_at >= since)
        return query.order_by(WeeklyReflection.week_start.asc()).all()
