from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from skillshub.config import get_settings

settings = get_settings()

engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    pool_recycle=1800,
    connect_args={"connect_timeout": 10} if settings.database_url.startswith("postgresql") else {},
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Yield a database session, closed when the request finishes."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
