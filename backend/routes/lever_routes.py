import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from auth import get_current_user
from config import DEFAULT_LEVER_XP
from database import get_db, unit_of_work
from errors import FixItError, NotFoundError, public_detail
from schemas import LeverOut
from services.lever_service import LeverService
from services.routine_service import RoutineService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/levers", tags=["Levers"])


class LeverCreate(BaseModel):
    lever_text: str = Field(..., min_length=1, max_length=500)
    xp_value: int = Field(DEFAULT_LEVER_XP, ge=0)
    order: int = 0


class LeverUpdate(BaseModel):
    lever_text: Optional[str] = Field(None, min_length=1, max_length=500)
    xp_value: Optional[int] = Field(None, ge=0)
    order: Optional[int] = None


class LeverEdit(LeverCreate):
    id: Optional[str] = None  # None → new lever


class LeverSync(BaseModel):
    levers: List[LeverEdit]


@router.get("", response_model=List[LeverOut])
def list_levers(user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return LeverService.get_active(db, user_id)
    except Exception as e:
        logger.exception(f"Failed to list levers for user {user_id}")
        raise HTTPException(status_code=500, detail=public_detail(e))


@router.post("", response_model=List[LeverOut])
def create_levers(body: List[LeverCreate], user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        with unit_of_work(db):
            created = LeverService.create_levers(db, user_id, [l.model_dump() for l in body])
        return created
    except FixItError:
        raise
    except Exception as e:
        logger.exception(f"Failed to create levers for user {user_id}")
        raise HTTPException(status_code=500, detail=public_detail(e))


@router.put("", response_model=List[LeverOut])
def sync_levers(body: LeverSync, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    """Quest editor save: the active lever set becomes exactly `levers`."""
    try:
        with unit_of_work(db):
            levers = LeverService.sync_levers(db, user_id, [l.model_dump() for l in body.levers])
        return levers
    except FixItError:
        raise
    except Exception as e:
        logger.exception(f"Failed to save levers for user {user_id}")
        raise HTTPException(status_code=500, detail=public_detail(e))


@router.put("/{lever_id}", response_model=LeverOut)
def update_lever(
    lever_id: str, body: LeverUpdate, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)
):
    try:
        with unit_of_work(db):
            lever = LeverService.update_lever(db, user_id, lever_id, body.model_dump(exclude_unset=True))
        return lever
    except FixItError:
        raise
    except Exception as e:
        logger.exception(f"Failed to update lever {lever_id}")
        raise HTTPException(status_code=500, detail=public_detail(e))


@router.delete("/{lever_id}")
def deactivate_lever(lever_id: str, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    """Soft delete: the lever disappears from the active list but stays referenced by old logs."""
    try:
        with unit_of_work(db):
            count = LeverService.deactivate_levers(db, user_id, [lever_id])
        if not count:
            raise NotFoundError(f"Lever {lever_id} not found")
        return {"status": "success"}
    except FixItError:
        raise
    except Exception as e:
        logger.exception(f"Failed to deactivate lever {lever_id}")
        raise HTTPException(status_code=500, detail=public_detail(e))


@router.post("/{lever_id}/toggle")
def toggle_lever(lever_id: str, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return RoutineService.toggle_lever(db, user_id, lever_id)
    except FixItError:
        raise
    except Exception as e:
        logger.exception(f"Failed to toggle lever {lever_id}")
        raise HTTPException(status_code=500, detail=public_detail(e))
