import os
import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.orm.exc import StaleDataError

from config import DATABASE_URL, LOG_LEVEL
from errors import ConflictError, ErrorMessages, WriteFailure

logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO))
logger = logging.getLogger(__name__)

# Only use connect_args if we are using SQLite
engine_args = {}
if DATABASE_URL.startswith("sqlite"):
    engine_args["connect_args"] = {"check_same_thread": False}
else:
    # Production settings for PostgreSQL
    engine_args.update({
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": 30,
        "pool_recycle": 1800,
    })

try:
    engine = create_engine(
        DATABASE_URL,
        **engine_args,
        echo=False,
    )
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
except Exception as e:
    logger.error(f"Failed to create engine: {e}")
    raise e

Base = declarative_base()


def get_db():
    """FastAPI dependency — yields a database session and closes it after use."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def unit_of_work(db):
    """
    Commit everything written inside the block, or nothing.
    Unique-constraint and version-check failures surface as ConflictError,
    any other database error as WriteFailure.
    """
    try:
        yield db
        db.commit()
    except (IntegrityError, StaleDataError) as e:
        db.rollback()
        logger.warning(f"Write conflict, rolled back: {e}")
        raise ConflictError(ErrorMessages.CONFLICT) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Write failed, rolled back: {e}")
        raise WriteFailure(ErrorMessages.GENERIC) from e
    except Exception:
        db.rollback()
        raise


def init_db():
    """Create the data/ directory if it doesn't exist, then create all tables."""
    if DATABASE_URL.startswith("sqlite:///./"):
        os.makedirs("data", exist_ok=True)

    # Import all models so they register with Base.metadata
    import models  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database initialized successfully.")
    except Exception as e:
        # On Supabase the schema is managed by migrations and the DB role
        # may lack CREATE privileges.
        logger.error(f"Error during database initialization: {e}")
