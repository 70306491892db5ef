"""
character_service.py — The character sheet (anti-vision, vision, goals)
One sheet per user, written at onboarding and edited afterwards.
"""

from datetime import datetime, timezone

from sqlalchemy.orm import Session

from errors import ConflictError, NotFoundError
from models.character_sheet import CharacterSheet

SHEET_FIELDS = ("anti_vision", "vision", "year_goal", "month_project", "constraints")


class CharacterSheetService:
    @staticmethod
    def get(db: Session, user_id: str) -> CharacterSheet | None:
        return db.query(CharacterSheet).filter_by(user_id=user_id).first()

    @staticmethod
    def create(db: Session, user_id: str, data: dict) -> CharacterSheet:
        if CharacterSheetService.get(db, user_id):
            raise ConflictError("Character sheet already exists")
        sheet = CharacterSheet(user_id=user_id, **{k: data.get(k) for k in SHEET_FIELDS})
        db.add(sheet)
        db.flush()
        return sheet

    @staticmethod
    def update(db: Session, user_id: str, data: dict) -> CharacterSheet:
        """Partial update; keys outside the sheet's text fields are ignored."""
        sheet = CharacterSheetService.get(db, user_id)
        if not sheet:
            raise NotFoundError("Character sheet not found")
        for k, v in data.items():
            if k in SHEET_FIELDS:
                setattr(sheet, k, v)
        sheet.updated_at = datetime.now(timezone.utc)
        db.flush()
        return sheet
