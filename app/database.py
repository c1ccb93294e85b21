from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
import logging

from app.config import DATABASE_URL

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    """Engine keyword arguments for the configured backend."""
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection, otherwise every session sees an empty database
            options["poolclass"] = StaticPool
        return options
    return {
        "pool_pre_ping": True,   # prevents "server has gone away" issues
        "pool_recycle": 280,     # helps with idle connection timeouts
    }


# ------------------------------------------------------------------------------
# DATABASE ENGINE & SESSION
# ------------------------------------------------------------------------------
try:
    engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base = declarative_base()
except Exception as e:
    logger.error(f"Failed to create SQLAlchemy engine: {e}")
    raise


# ------------------------------------------------------------------------------
# DB DEPENDENCY
# ------------------------------------------------------------------------------
def get_db():
    """Dependency to provide a DB session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ------------------------------------------------------------------------------
# INITIALIZATION
# ------------------------------------------------------------------------------
def init_db():
    """Initialize database tables (runs once on startup)."""
    from app import models  # noqa: F401  ensure models are registered
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully.")
