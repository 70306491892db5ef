import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from auth import get_current_user
from database import get_db, unit_of_work
from errors import FixItError, NotFoundError, public_detail
from schemas import BossFightOut, BossFightOverviewOut
from services.boss_fight_service import BossFightService
from services.routine_service import RoutineService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/boss-fight", tags=["Boss Fight"])


class ProgressUpdate(BaseModel):
    progress: int = Field(..., ge=0, le=100)


class BossFightCompletion(BaseModel):
    was_completed: bool
    learnings: str = Field("", max_length=10000)
    next_project: str = Field(..., max_length=10000)
    vision: Optional[str] = Field(None, max_length=10000)
    anti_vision: Optional[str] = Field(None, max_length=10000)
    loot: Optional[List[str]] = None


@router.get("", response_model=BossFightOverviewOut)
def get_boss_fight(user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return RoutineService.get_boss_fight_overview(db, user_id)
    except Exception as e:
        logger.exception(f"Failed to load boss fight for user {user_id}")
        raise HTTPException(status_code=500, detail=public_detail(e))


@router.put("/progress", response_model=BossFightOut)
def update_progress(body: ProgressUpdate, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        with unit_of_work(db):
            fight = BossFightService.update_progress(db, user_id, body.progress)
        if fight is None:
            raise NotFoundError("No active boss fight")
        return fight
    except FixItError:
        raise
    except Exception as e:
        logger.exception(f"Failed to update boss fight progress for user {user_id}")
        raise HTTPException(status_code=500, detail=public_detail(e))


@router.post("/complete")
def complete_boss_fight(
    body: BossFightCompletion, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Month end: close the fight, bank its XP, start next month's."""
    try:
        return RoutineService.complete_monthly_boss_fight(
            db,
            user_id,
            was_completed=body.was_completed,
            learnings=body.learnings,
            next_project=body.next_project,
            vision=body.vision,
            anti_vision=body.anti_vision,
            loot=body.loot,
        )
    except FixItError:
        raise
    except Exception as e:
        logger.exception(f"Boss fight completion failed for user {user_id}")
        raise HTTPException(status_code=500, detail=public_detail(e))
