import logging
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from auth import get_current_user
from database import get_db
from errors import FixItError, public_detail
from schemas import DailyLogOut
from services.daily_log_service import DailyLogService
from services.routine_service import RoutineService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/daily-log", tags=["Daily Log"])


class DirectionCheck(BaseModel):
    direction: Literal["vision", "hate"]
    comment: str = Field(..., max_length=5000)


@router.get("", response_model=Optional[DailyLogOut])
def get_today_log(user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return DailyLogService.get(db, user_id)
    except Exception as e:
        logger.exception(f"Failed to load today's log for user {user_id}")
        raise HTTPException(status_code=500, detail=public_detail(e))


@router.get("/recent", response_model=List[DailyLogOut])
def get_recent_logs(
    days: int = Query(7, ge=1, le=366), user_id: str = Depends(get_current_user), db: Session = Depends(get_db)
):
    try:
        return DailyLogService.get_recent(db, user_id, days)
    except Exception as e:
        logger.exception(f"Failed to load recent logs for user {user_id}")
        raise HTTPException(status_code=500, detail=public_detail(e))


@router.post("/direction")
def submit_direction(body: DirectionCheck, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return RoutineService.submit_direction_check(db, user_id, body.direction, body.comment)
    except FixItError:
        raise
    except Exception as e:
        logger.exception(f"Direction check failed for user {user_id}")
        raise HTTPException(status_code=500, detail=public_detail(e))
