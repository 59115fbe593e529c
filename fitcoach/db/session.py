import logging

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from fitcoach.core.config import settings

logger = logging.getLogger(__name__)

db_url = settings.database_url

# Replace any escaped colons in the URL
if db_url:
    db_url = db_url.replace("\\x3a", ":")

logger.info("ENVIRONMENT = %s", settings.ENVIRONMENT)

connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}

engine = create_engine(db_url, pool_pre_ping=True, echo=settings.DB_ECHO, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """
    Dependency for database session.

    Yields:
        Session: Database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create all tables that do not exist yet."""
    from fitcoach.db.base_class import Base
    import fitcoach.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def check_database_health(db: Session) -> bool:
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False
