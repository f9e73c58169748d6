from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from app.core.config import settings


def make_engine(url: str = settings.LEDGER_URL) -> Engine:
    connect_args = {}
    if url.startswith("sqlite"):
        # sessions are opened from fastapi's worker threads
        connect_args["check_same_thread"] = False
    return create_engine(url, connect_args=connect_args, pool_pre_ping=True)


# Create the SQLAlchemy engine for the ledger store
engine = make_engine()

# Create a configured "Session" class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
