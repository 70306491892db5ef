"""
lever_service.py — Daily levers ("quests")
Levers are never hard-deleted: removing one flips `active` off so old
daily logs can still point at it.
"""

import re

from sqlalchemy.orm import Session

from config import DEFAULT_LEVER_XP
from errors import NotFoundError
from models.daily_lever import DailyLever

_NUMBERING = re.compile(r"^\d+\.\s*")


class LeverService:
    @staticmethod
    def get_active(db: Session, user_id: str) -> list[DailyLever]:
        return (
            db.query(DailyLever)
            .filter_by(user_id=user_id, active=True)
            .order_by(DailyLever.order.asc(), DailyLever.created_at.asc())
            .all()
        )

    @staticmethod
    def get(db: Session, user_id: str, lever_id: str) -> DailyLever | None:
        """Any lever of this user, active or not."""
        return db.query(DailyLever).filter_by(id=lever_id, user_id=user_id).first()

    @staticmethod
    def create_levers(db: Session, user_id: str, levers: list[dict]) -> list[DailyLever]:
        """Insert levers with their `order` exactly as given."""
        created = [
            DailyLever(
                user_id=user_id,
                lever_text=l["lever_text"],
                xp_value=l.get("xp_value", DEFAULT_LEVER_XP),
                order=l.get("order", 0),
                active=True,
            )
            for l in levers
        ]
        db.add_all(created)
        db.flush()
        return created

    @staticmethod
    def update_lever(db: Session, user_id: str, lever_id: str, data: dict) -> DailyLever:
        lever = LeverService.get(db, user_id, lever_id)
        if not lever:
            raise NotFoundError(f"Lever {lever_id} not found")
        for k in ("lever_text", "xp_value", "order", "active"):
            if k in data and data[k] is not None:
                setattr(lever, k, data[k])
        db.flush()
        return lever

    @staticmethod
    def deactivate_levers(db: Session, user_id: str, lever_ids: list[str]) -> int:
        if not lever_ids:
            return 0
        count = (
            db.query(DailyLever)
            .filter(DailyLever.user_id == user_id, DailyLever.id.in_(lever_ids))
            .update({DailyLever.active: False}, synchronize_session="fetch")
        )
        return count

    @staticmethod
    def sync_levers(db: Session, user_id: str, edited: list[dict]) -> list[DailyLever]:
        """
        Make the active set match `edited`: levers missing from it are
        deactivated, entries with an id are updated (and reactivated if they
        had been removed), entries without one are inserted.
        """
        current = LeverService.get_active(db, user_id)
        kept_ids = {l["id"] for l in edited if l.get("id")}

        removed = [l.id for l in current if l.id not in kept_ids]
        LeverService.deactivate_levers(db, user_id, removed)

        for l in edited:
            if l.get("id"):
                LeverService.update_lever(db, user_id, l["id"], {
                    "lever_text": l.get("lever_text"),
                    "xp_value": l.get("xp_value"),
                    "order": l.get("order"),
                    "active": True,
                })

        new = [l for l in edited if not l.get("id")]
        if new:
            LeverService.create_levers(db, user_id, new)

        return LeverService.get_active(db, user_id)

    @staticmethod
    def parse_lever_lines(text: str, xp_value: int = DEFAULT_LEVER_XP) -> list[dict]:
        """One lever per non-blank line; a leading "1. " style number is dropped."""
        lines = [line.strip() for line in (text or "").split("\n") if line.strip()]
        return [
            {"lever_text": _NUMBERING.sub("", line).strip(), "xp_value": xp_value, "order": i}
            for i, line in enumerate(lines)
        ]
