from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.constants import DATABASE_URL
from app.models import Base

if DATABASE_URL.startswith("sqlite"):
    # SQLite needs this to be shared across FastAPI's threadpool
    connect_args = {"check_same_thread": False}
else:
    connect_args = {}

engine = create_engine(DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """Create tables for local development.

    PostgreSQL deployments use the alembic migrations instead, which also
    install the updated_at trigger and the row level security policies.
    """
    Base.metadata.create_all(bind=engine)
