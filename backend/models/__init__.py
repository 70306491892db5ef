# Import all models so they register with SQLAlchemy Base.metadata
# This ensures Base.metadata.create_all() creates all tables

from models.user import User
from models.character_sheet import CharacterSheet
from models.daily_lever import DailyLever
from models.daily_log import DailyLog
from models.boss_fight import BossFight
from models.weekly_reflection import WeeklyReflection

__all__ = [
    "User",
    "CharacterSheet",
    "DailyLever",
    "DailyLog",
    "BossFight",
    "WeeklyReflection",
]
