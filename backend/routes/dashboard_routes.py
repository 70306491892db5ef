import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from auth import get_current_user
from database import get_db
from errors import FixItError, public_detail
from schemas import DashboardOut
from services.routine_service import RoutineService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardOut)
def get_dashboard(user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    """Everything the HUD needs in one call: user, level progress, sheet, levers, boss fight, today's log."""
    try:
        return RoutineService.load_dashboard(db, user_id)
    except FixItError:
        raise
    except Exception as e:
        logger.exception(f"Failed to load dashboard for user {user_id}")
        raise HTTPException(status_code=500, detail=public_detail(e))
