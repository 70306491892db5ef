import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from auth import get_current_user
from database import get_db
from errors import FixItError, public_detail
from schemas import WeeklyReflectionOut
from services.reflection_service import WeeklyReflectionService
from services.routine_service import RoutineService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/weekly-reflections", tags=["Weekly Reflection"])


class WeeklyReflectionCreate(BaseModel):
    most_alive: Optional[str] = Field(None, max_length=5000)
    most_dead: Optional[str] = Field(None, max_length=5000)
    pattern_noticed: Optional[str] = Field(None, max_length=5000)
    blocking_progress: Optional[str] = Field(None, max_length=5000)
    anti_vision_check: Optional[bool] = None
    levers_adjusted: Optional[bool] = None
    project_progress: Optional[int] = Field(None, ge=0, le=100)


@router.get("", response_model=List[WeeklyReflectionOut])
def list_reflections(user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return WeeklyReflectionService.get_all(db, user_id)
    except Exception as e:
        logger.exception(f"Failed to list reflections for user {user_id}")
        raise HTTPException(status_code=500, detail=public_detail(e))


@router.post("")
def complete_reflection(
    body: WeeklyReflectionCreate, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)
):
    try:
        answers = body.model_dump(exclude={"project_progress"})
        return RoutineService.complete_weekly_reflection(db, user_id, answers, body.project_progress)
    except FixItError:
        raise
    except Exception as e:
        logger.exception(f"Weekly reflection failed for user {user_id}")
        raise HTTPException(status_code=500, detail=public_detail(e))
