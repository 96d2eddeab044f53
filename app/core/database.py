import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from app.core.config import settings

logger = logging.getLogger(__name__)

# SQLite (local dev/tests) doesn't take pool sizing arguments
if settings.DATABASE_URL.startswith("sqlite"):
    engine = create_engine(
        settings.DATABASE_URL,
        connect_args={"check_same_thread": False}
    )
else:
    engine = create_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,  # Verify connections before using them
        pool_size=10,  # Connection pool size
        max_overflow=20  # Allow up to 20 connections beyond pool_size
    )

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """
    Initialize database.

    Alembic owns the schema ("alembic upgrade head"). Tables are only created
    here when DB_AUTO_CREATE is set, which is handy for local SQLite runs.
    """
    from app.models import translation_job  # noqa: F401 - registers the table

    if settings.DB_AUTO_CREATE:
        logger.info("DB_AUTO_CREATE enabled, creating missing tables")
        Base.metadata.create_all(bind=engine)
