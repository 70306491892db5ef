import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from auth import get_current_user
from database import get_db, unit_of_work
from errors import FixItError, public_detail
from schemas import CharacterSheetOut
from services.character_service import CharacterSheetService
from services.routine_service import RoutineService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Character Sheet"])


class CharacterSheetUpdate(BaseModel):
    anti_vision: Optional[str] = Field(None, max_length=10000)
    vision: Optional[str] = Field(None, max_length=10000)
    year_goal: Optional[str] = Field(None, max_length=10000)
    month_project: Optional[str] = Field(None, max_length=10000)
    constraints: Optional[str] = Field(None, max_length=10000)


class QuickSetup(BaseModel):
    anti_vision: str = Field(..., max_length=10000)
    vision: str = Field(..., max_length=10000)
    year_goal: str = Field(..., max_length=10000)
    month_project: str = Field(..., max_length=10000)
    constraints: str = Field(..., max_length=10000)
    daily_levers: str = Field(..., max_length=10000)  # one lever per line


@router.get("/character-sheet", response_model=Optional[CharacterSheetOut])
def get_character_sheet(user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return CharacterSheetService.get(db, user_id)
    except Exception as e:
        logger.exception(f"Failed to load character sheet for user {user_id}")
        raise HTTPException(status_code=500, detail=public_detail(e))


@router.put("/character-sheet", response_model=CharacterSheetOut)
def update_character_sheet(
    body: CharacterSheetUpdate, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)
):
    try:
        with unit_of_work(db):
            sheet = CharacterSheetService.update(db, user_id, body.model_dump(exclude_unset=True))
        return sheet
    except FixItError:
        raise
    except Exception as e:
        logger.exception(f"Failed to update character sheet for user {user_id}")
        raise HTTPException(status_code=500, detail=public_detail(e))


@router.post("/onboarding/quick-setup")
def quick_setup(body: QuickSetup, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    """Create the character sheet, the first levers and the first boss fight."""
    try:
        data = body.model_dump()
        levers_text = data.pop("daily_levers")
        result = RoutineService.complete_onboarding(db, user_id, data, levers_text)
        return {"status": "success", "data": result}
    except FixItError:
        raise
    except Exception as e:
        logger.exception(f"Onboarding failed for user {user_id}")
        raise HTTPException(status_code=500, detail=public_detail(e))
