"""
boss_fight_service.py — The month's primary project
At most one fight per user is active. `complete` records the reward on the
fight only; crediting it to the user is the caller's job.
"""

import logging
from datetime import date as date_type, datetime, timezone

from sqlalchemy.orm import Session

from config import BOSS_DEFEATED_XP, BOSS_FAILED_XP
from errors import ConflictError, NotFoundError, ValidationError
from models.boss_fight import BossFight

logger = logging.getLogger(__name__)


def month_start(d: date_type) -> date_type:
    return d.replace(day=1)


def next_month_start(d: date_type) -> date_type:
    d = month_start(d)
    return d.replace(year=d.year + 1, month=1) if d.month == 12 else d.replace(month=d.month + 1)


def validate_progress(progress: int) -> int:
    if progress is None or not 0 <= progress <= 100:
        raise ValidationError("Progress must be between 0 and 100")
    return progress


class BossFightService:
    @staticmethod
    def get_active(db: Session, user_id: str) -> BossFight | None:
        """Most recently created active fight, if any."""
        return (
            db.query(BossFight)
            .filter_by(user_id=user_id, status="active")
            .order_by(BossFight.created_at.desc())
            .first()
        )

    @staticmethod
    def get(db: Session, user_id: str, boss_id: str) -> BossFight | None:
        return db.query(BossFight).filter_by(id=boss_id, user_id=user_id).first()

    @staticmethod
    def create(
        db: Session,
        user_id: str,
        project_text: str,
        start: date_type | None = None,
        completion_criteria: str | None = None,
    ) -> BossFight:
        """Open a fight for the month of `start` (default: this month), closing any still-active one first."""
        lingering = db.query(BossFight).filter_by(user_id=user_id, status="active").all()
        for old in lingering:
            old.status = "failed"
            old.xp_gained = 0
            old.completed_at = datetime.now(timezone.utc)
            logger.warning(f"Closed lingering active boss fight {old.id} for user {user_id}")
        if lingering:
            db.flush()

        fight = BossFight(
            user_id=user_id,
            month_start=month_start(start or datetime.now(timezone.utc).date()),
            project_text=project_text,
            completion_criteria=completion_criteria,
            status="active",
            progress=0,
            loot_acquired=[],
            xp_gained=0,
        )
        db.add(fight)
        db.flush()
        return fight

    @staticmethod
    def update_progress(db: Session, user_id: str, progress: int) -> BossFight | None:
        """Set progress on the active fight. Returns None when there is none."""
        validate_progress(progress)
        fight = BossFightService.get_active(db, user_id)
        if fight is None:
            return None
        fight.progress = progress
        db.flush()
        return fight

    @staticmethod
    def complete(
        db: Session,
        user_id: str,
        boss_id: str,
        was_completed: bool,
        learnings: str,
        loot: list[str] | None = None,
    ) -> int:
        """Close the fight as defeated or failed and return the XP it is worth."""
        fight = BossFightService.get(db, user_id, boss_id)
        if fight is None:
            raise NotFoundError(f"Boss fight {boss_id} not found")
        if fight.status != "active":
            raise ConflictError(f"Boss fight {boss_id} is already {fight.status}")

        xp_gain = BOSS_DEFEATED_XP if was_completed else BOSS_FAILED_XP
        fight.status = "defeated" if was_completed else "failed"
        if was_completed:
            fight.progress = 100
        fight.learnings = learnings
        if loot is not None:
            fight.loot_acquired = list(loot)
        fight.xp_gained = xp_gain
        fight.completed_at = datetime.now(timezone.utc)
        db.flush()
        return xp_gain
