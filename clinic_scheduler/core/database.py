from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from typing import Generator
import logging

from .config import settings

logger = logging.getLogger(__name__)

database_url = settings.get_database_url

if database_url.startswith("sqlite"):
    # SQLite connections are shared across the TestClient threads
    engine = create_engine(
        database_url,
        connect_args={"check_same_thread": False},
    )
else:
    # PostgreSQL database setup with appropriate connection pool settings
    engine = create_engine(
        database_url,
        pool_size=5,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=1800,  # Recycle connections after 30 minutes
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Database dependency
def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# Database initialization
def init_db():
    """Initialize database tables and backfill missing weekly schedules."""
    # Models must be imported so their tables are registered on Base.metadata
    from .. import models  # noqa: F401
    from ..services.doctor_service import DoctorService

    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        seeded = DoctorService(db).seed_missing_schedules()
        if seeded:
            logger.info(f"Seeded weekly schedules for {seeded} doctor(s)")
    finally:
        db.close()
