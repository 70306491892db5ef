"""
Response schemas shared by the routes.
Each mirrors one table; built straight from the ORM rows.
"""
from datetime import date as date_type, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class UserOut(ORMModel):
    id: str
    email: Optional[str] = None
    total_xp: int
    current_level: int
    current_streak: int
    longest_streak: int
    created_at: Optional[datetime] = None


class CharacterSheetOut(ORMModel):
    id: str
    anti_vision: Optional[str] = None
    vision: Optional[str] = None
    year_goal: Optional[str] = None
    month_project: Optional[str] = None
    constraints: Optional[str] = None
    updated_at: Optional[datetime] = None


class LeverOut(ORMModel):
    id: str
    lever_text: str
    xp_value: int
    order: int
    active: bool
    created_at: Optional[datetime] = None


class DailyLogOut(ORMModel):
    id: str
    date: date_type
    direction: Optional[Literal["vision", "hate"]] = None
    comment: Optional[str] = None
    levers_completed: List[str] = []
    xp_gained: int
    created_at: Optional[datetime] = None


class BossFightOut(ORMModel):
    id: str
    month_start: date_type
    project_text: str
    completion_criteria: Optional[str] = None
    status: Literal["active", "defeated", "failed"]
    progress: int = Field(..., ge=0, le=100)
    learnings: Optional[str] = None
    loot_acquired: List[str] = []
    xp_gained: int
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class WeeklyReflectionOut(ORMModel):
    id: str
    week_start: date_type
    most_alive: Optional[str] = None
    most_dead: Optional[str] = None
    pattern_noticed: Optional[str] = None
    blocking_progress: Optional[str] = None
    anti_vision_check: Optional[bool] = None
    levers_adjusted: Optional[bool] = None
    project_progress: Optional[int] = None
    created_at: Optional[datetime] = None


class ProgressOut(BaseModel):
    total_xp: int
    level: int
    level_title: str
    xp_for_next_level: int
    progress_percent: float


class DashboardOut(BaseModel):
    user: UserOut
    progress: ProgressOut
    sheet: Optional[CharacterSheetOut] = None
    levers: List[LeverOut] = []
    active_boss: Optional[BossFightOut] = None
    today_log: Optional[DailyLogOut] = None


class BossFightOverviewOut(BaseModel):
    boss_fight: Optional[BossFightOut] = None
    weekly_reflections: List[WeeklyReflectionOut] = []
