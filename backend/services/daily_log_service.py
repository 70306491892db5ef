"""
daily_log_service.py — One log per user per day
Holds the direction check and the set of levers completed today.
`xp_gained` is a running sum of the deltas applied through this log; the
row is version-checked so a concurrent writer gets a ConflictError
instead of silently losing a delta.
"""

import logging
from datetime import date as date_type, datetime, timezone, timedelta

from sqlalchemy.orm import Session

from errors import ConflictError, NotFoundError
from models.daily_log import DailyLog
from services.lever_service import LeverService
from services.user_service import UserService

logger = logging.getLogger(__name__)

LOG_FIELDS = ("direction", "comment", "levers_completed", "lever_credits", "xp_gained", "direction_rewarded")


def utc_today() -> date_type:
    return datetime.now(timezone.utc).date()


class DailyLogService:
    @staticmethod
    def get(db: Session, user_id: str, date: date_type | None = None) -> DailyLog | None:
        d = date or utc_today()
        return db.query(DailyLog).filter_by(user_id=user_id, date=d).first()

    @staticmethod
    def save(db: Session, user_id: str, date: date_type | None = None, **fields) -> DailyLog:
        """Update the day's log if there is one, otherwise insert it."""
        d = date or utc_today()
        log = DailyLogService.get(db, user_id, d)
        if log is None:
            log = DailyLog(user_id=user_id, date=d, levers_completed=[], lever_credits={}, xp_gained=0)
            db.add(log)
        for k, v in fields.items():
            if k in LOG_FIELDS:
                setattr(log, k, v)
        db.flush()
        return log

    @staticmethod
    def toggle_lever(db: Session, user_id: str, lever_id: str, date: date_type | None = None) -> tuple[int, bool]:
        """
        Flip `lever_id` in the day's completed set and move both the log's
        running total and the user's XP by the lever's value. Un-checking
        takes back what was credited when it was checked, even if the lever
        has been re-valued since.
        Returns (xp_change, is_completed).
        """
        lever = LeverService.get(db, user_id, lever_id)
        if lever is None:
            raise NotFoundError(f"Lever {lever_id} not found")

        log = DailyLogService.get(db, user_id, date)
        completed = list(log.levers_completed or []) if log else []
        credits = dict(log.lever_credits or {}) if log else {}
        was_completed = lever_id in completed

        if was_completed:
            completed = [i for i in completed if i != lever_id]
            xp_change = -credits.pop(lever_id, lever.xp_value)
        else:
            if not lever.active:
                raise ConflictError("Inactive levers can't be completed")
            completed.append(lever_id)
            xp_change = lever.xp_value
            credits[lever_id] = xp_change

        DailyLogService.save(
            db, user_id, date,
            levers_completed=completed,
            lever_credits=credits,
            xp_gained=(log.xp_gained if log else 0) + xp_change,
        )
        UserService.apply_xp_delta(db, user_id, xp_change)
        logger.info(f"Lever {lever_id} {'unchecked' if was_completed else 'checked'} by user {user_id}")
        return xp_change, not was_completed

    @staticmethod
    def get_recent(db: Session, user_id: str, days_back: int = 7) -> list[DailyLog]:
        start = utc_today() - timedelta(days=days_back)
        return (
            db.query(DailyLog)
            .filter(DailyLog.user_id == user_id, DailyLog.date >= start)
            .order_by(DailyLog.date.desc())
            .all()
        )
