"""
user_service.py — User XP, level and streak counters
Counters move through single UPDATE statements (col = col + delta) so two
sessions applying deltas at once can't overwrite each other.
"""

import logging

from sqlalchemy import case
from sqlalchemy.orm import Session

from errors import NotFoundError
from models.user import User
from services.progression import DEFAULT_LEVEL_TABLE, LevelTable, calculate_level

logger = logging.getLogger(__name__)


class UserService:
    @staticmethod
    def get(db: Session, user_id: str) -> User | None:
        return db.query(User).filter_by(id=user_id).first()

    @staticmethod
    def get_or_create(db: Session, user_id: str, email: str | None = None) -> User:
        """Users are created lazily on their first authenticated request."""
        user = UserService.get(db, user_id)
        if user:
            return user
        user = User(id=user_id, email=email, total_xp=0, current_level=1, current_streak=0, longest_streak=0)
        db.add(user)
        db.flush()
        logger.info(f"Created user record {user_id}")
        return user

    @staticmethod
    def apply_xp_delta(
        db: Session, user_id: str, delta: int, table: LevelTable = DEFAULT_LEVEL_TABLE
    ) -> tuple[int, int]:
        """Add `delta` (may be negative, floored at 0) and recompute the level. Returns (new_total, new_level)."""
        UserService.get_or_create(db, user_id)
        summed = User.total_xp + delta
        db.query(User).filter(User.id == user_id).update(
            {User.total_xp: case((summed < 0, 0), else_=summed)},
            synchronize_session="fetch",
        )
        new_total = db.query(User.total_xp).filter(User.id == user_id).scalar()
        if new_total is None:
            raise NotFoundError(f"User {user_id} not found")

        new_level = calculate_level(new_total, table)
        db.query(User).filter(User.id == user_id).update(
            {User.current_level: new_level},
            synchronize_session="fetch",
        )
        logger.info(f"XP {delta:+d} for user {user_id}: total={new_total} level={new_level}")
        return new_total, new_level

    @staticmethod
    def apply_streak_delta(db: Session, user_id: str, delta: int) -> int:
        """Move the current streak by `delta` (floored at 0); longest_streak keeps the high-water mark."""
        UserService.get_or_create(db, user_id)
        summed = User.current_streak + delta
        new_streak = case((summed < 0, 0), else_=summed)
        db.query(User).filter(User.id == user_id).update(
            {
                User.current_streak: new_streak,
                User.longest_streak: case((new_streak > User.longest_streak, new_streak), else_=User.longest_streak),
            },
            synchronize_session="fetch",
        )
        streak = db.query(User.current_streak).filter(User.id == user_id).scalar()
        logger.info(f"Streak {delta:+d} for user {user_id}: current={streak}")
        return streak
