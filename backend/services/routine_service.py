"""
routine_service.py — The user-facing routines
Daily direction check, lever toggles, weekly reflection, monthly boss fight
and onboarding. Each routine runs in a single unit of work: all of its
writes land together or none do.
"""

import logging
from datetime import date as date_type, datetime, timezone

from sqlalchemy.orm import Session

from config import DIRECTION_CHECK_XP, WEEKLY_REFLECTION_XP
from database import unit_of_work
from errors import ValidationError
from services.boss_fight_service import BossFightService, month_start, next_month_start, validate_progress
from services.character_service import SHEET_FIELDS, CharacterSheetService
from services.daily_log_service import DailyLogService
from services.lever_service import LeverService
from services.progression import (
    calculate_level,
    clamp_progress,
    get_level_title,
    get_xp_for_next_level,
    get_xp_progress,
)
from services.reflection_service import WeeklyReflectionService
from services.user_service import UserService

logger = logging.getLogger(__name__)

DIRECTIONS = ("vision", "hate")


def level_summary(total_xp: int) -> dict:
    level = calculate_level(total_xp)
    return {
        "total_xp": total_xp,
        "level": level,
        "level_title": get_level_title(level),
        "xp_for_next_level": get_xp_for_next_level(level),
        "progress_percent": round(clamp_progress(get_xp_progress(total_xp, level)), 2),
    }


class RoutineService:
    @staticmethod
    def load_dashboard(db: Session, user_id: str, email: str | None = None) -> dict:
        with unit_of_work(db):
            user = UserService.get_or_create(db, user_id, email)
        return {
            "user": user,
            "progress": level_summary(user.total_xp),
            "sheet": CharacterSheetService.get(db, user_id),
            "levers": LeverService.get_active(db, user_id),
            "active_boss": BossFightService.get_active(db, user_id),
            "today_log": DailyLogService.get(db, user_id),
        }

    @staticmethod
    def toggle_lever(db: Session, user_id: str, lever_id: str, date: date_type | None = None) -> dict:
        with unit_of_work(db):
            xp_change, is_completed = DailyLogService.toggle_lever(db, user_id, lever_id, date)
            user = UserService.get(db, user_id)
            db.refresh(user)
            total_xp, level = user.total_xp, user.current_level
        return {"xp_change": xp_change, "is_completed": is_completed, "total_xp": total_xp, "level": level}

    @staticmethod
    def submit_direction_check(
        db: Session, user_id: str, direction: str, comment: str, date: date_type | None = None
    ) -> dict:
        """
        Record today's direction. A "vision" answer pays the streak and XP
        bonus once per day; "hate" pays nothing and leaves the streak alone.
        Answering again the same day rewrites the same log.
        """
        if direction not in DIRECTIONS:
            raise ValidationError(f"Direction must be one of {', '.join(DIRECTIONS)}")
        if not comment or not comment.strip():
            raise ValidationError("A comment is required")

        with unit_of_work(db):
            user = UserService.get_or_create(db, user_id)
            log = DailyLogService.get(db, user_id, date)
            award = direction == "vision" and not (log and log.direction_rewarded)
            xp_gain = DIRECTION_CHECK_XP if award else 0

            fields = {
                "direction": direction,
                "comment": comment.strip(),
                "xp_gained": (log.xp_gained if log else 0) + xp_gain,
            }
            if award:
                fields["direction_rewarded"] = True
            DailyLogService.save(db, user_id, date, **fields)

            if award:
                streak = UserService.apply_streak_delta(db, user_id, 1)
                total_xp, level = UserService.apply_xp_delta(db, user_id, xp_gain)
            else:
                streak, total_xp, level = user.current_streak, user.total_xp, user.current_level

        return {"xp_gained": xp_gain, "current_streak": streak, "total_xp": total_xp, "level": level}

    @staticmethod
    def complete_weekly_reflection(
        db: Session, user_id: str, answers: dict, project_progress: int | None = None, today: date_type | None = None
    ) -> dict:
        """Store the reflection, push its progress onto the active boss fight, pay the fixed reward."""
        if project_progress is not None:
            validate_progress(project_progress)

        with unit_of_work(db):
            UserService.get_or_create(db, user_id)
            reflection = WeeklyReflectionService.create(
                db, user_id, {**answers, "project_progress": project_progress}, today
            )
            if project_progress is not None:
                BossFightService.update_progress(db, user_id, project_progress)
            total_xp, level = UserService.apply_xp_delta(db, user_id, WEEKLY_REFLECTION_XP)
            reflection_id = reflection.id

        return {"reflection_id": reflection_id, "xp_gained": WEEKLY_REFLECTION_XP, "total_xp": total_xp, "level": level}

    @staticmethod
    def complete_monthly_boss_fight(
        db: Session,
        user_id: str,
        was_completed: bool,
        learnings: str,
        next_project: str,
        vision: str | None = None,
        anti_vision: str | None = None,
        loot: list[str] | None = None,
    ) -> dict:
        """
        Close this month's fight with its reward, open next month's, and
        write the new project (plus any edited vision/anti-vision) to the sheet.
        """
        if not next_project or not next_project.strip():
            raise ValidationError("Next month's project is required")
        next_project = next_project.strip()

        with unit_of_work(db):
            user = UserService.get_or_create(db, user_id)
            total_xp, level = user.total_xp, user.current_level
            xp_gain = 0
            start = month_start(datetime.now(timezone.utc).date())

            fight = BossFightService.get_active(db, user_id)
            if fight:
                xp_gain = BossFightService.complete(db, user_id, fight.id, was_completed, learnings, loot)
                total_xp, level = UserService.apply_xp_delta(db, user_id, xp_gain)
                start = max(next_month_start(fight.month_start), start)

            new_fight = BossFightService.create(db, user_id, next_project, start)

            updates = {"month_project": next_project}
            if vision and vision.strip():
                updates["vision"] = vision.strip()
            if anti_vision and anti_vision.strip():
                updates["anti_vision"] = anti_vision.strip()
            if CharacterSheetService.get(db, user_id):
                CharacterSheetService.update(db, user_id, updates)
            else:
                CharacterSheetService.create(db, user_id, updates)

            new_fight_id = new_fight.id

        logger.info(f"Boss fight closed for user {user_id} ({'defeated' if was_completed else 'failed'}), +{xp_gain} XP")
        return {"xp_gained": xp_gain, "total_xp": total_xp, "level": level, "new_boss_fight_id": new_fight_id}

    @staticmethod
    def complete_onboarding(db: Session, user_id: str, sheet: dict, levers_text: str, email: str | None = None) -> dict:
        """Quick setup: character sheet, the daily levers typed one per line, and the first boss fight."""
        missing = [k for k in SHEET_FIELDS if not (sheet.get(k) or "").strip()]
        if missing:
            raise ValidationError(f"Missing fields: {', '.join(missing)}")
        levers = LeverService.parse_lever_lines(levers_text)
        if not levers:
            raise ValidationError("At least one daily lever is required")

        with unit_of_work(db):
            UserService.get_or_create(db, user_id, email)
            CharacterSheetService.create(db, user_id, {k: sheet[k].strip() for k in SHEET_FIELDS})
            created = LeverService.create_levers(db, user_id, levers)
            fight = BossFightService.create(db, user_id, sheet["month_project"].strip())
            result = {"levers_created": len(created), "boss_fight_id": fight.id}

        logger.info(f"Onboarding completed for user {user_id}")
        return result

    @staticmethod
    def get_boss_fight_overview(db: Session, user_id: str) -> dict:
        """Active fight plus the weekly reflections written since it started."""
        fight = BossFightService.get_active(db, user_id)
        reflections = WeeklyReflectionService.get_all(db, user_id, since=fight.created_at) if fight else []
        return {"boss_fight": fight, "weekly_reflections": reflections}
