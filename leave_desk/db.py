from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from .core.config import settings


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True, "pool_recycle": 300}


engine = create_engine(settings.database_url, **_engine_options(settings.database_url))
SessionLocal = sessionmaker(bind=engine, autoflush=False)


def get_session():
    session: Session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
