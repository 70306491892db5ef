import os
from dotenv import load_dotenv

load_dotenv()

# --- App ---
APP_NAME = os.getenv("APP_NAME", "FixIt")
APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# --- Database ---
# Default to local SQLite, but prefer environment variable (Supabase Postgres in production)
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data/fixit.db")

# Fix for common SQLAlchemy issues with postgres:// vs postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

# --- Supabase Configuration ---
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")

# --- JWT Configuration (Supabase access tokens) ---
SUPABASE_JWT_SECRET = os.getenv("SUPABASE_JWT_SECRET", "")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "authenticated")

# --- Rewards ---
DIRECTION_CHECK_XP = int(os.getenv("DIRECTION_CHECK_XP", "50"))
WEEKLY_REFLECTION_XP = int(os.getenv("WEEKLY_REFLECTION_XP", "200"))
BOSS_DEFEATED_XP = int(os.getenv("BOSS_DEFEATED_XP", "1000"))
BOSS_FAILED_XP = int(os.getenv("BOSS_FAILED_XP", "250"))
DEFAULT_LEVER_XP = int(os.getenv("DEFAULT_LEVER_XP", "50"))
