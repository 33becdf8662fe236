import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
import uuid
import sys
from pathlib import Path

# Add parent directory to path so main and app modules can be imported
backend_root = Path(__file__).parent.parent
sys.path.insert(0, str(backend_root))

from main import app
from app.database import get_db
from app.models import Base, AddedEmail
from app.core.rate_limit import limiter
from app.services.added_email import AddedEmailService
from app.utils.auth import Principal, ANONYMOUS, create_access_token

# Use in-memory SQLite for tests
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture
def engine():
    """Fresh in-memory database per test"""
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory) -> Session:
    """Get test database session"""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    """Get test client wired to the test database"""

    def override_get_db():
        try:
            db = session_factory()
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    limiter.reset()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def service() -> AddedEmailService:
    return AddedEmailService()


@pytest.fixture
def owner() -> Principal:
    return Principal(user_id=uuid.uuid4())


@pytest.fixture
def other_user() -> Principal:
    return Principal(user_id=uuid.uuid4())


@pytest.fixture
def anonymous() -> Principal:
    return ANONYMOUS


def auth_headers(principal: Principal) -> dict:
    return {"Authorization": f"Bearer {create_access_token(principal.user_id)}"}


@pytest.fixture
def owner_headers(owner: Principal) -> dict:
    return auth_headers(owner)


@pytest.fixture
def other_headers(other_user: Principal) -> dict:
    return auth_headers(other_user)


@pytest.fixture
def owned_email(db: Session, owner: Principal) -> AddedEmail:
    """An entry created by ``owner``"""
    record = AddedEmail(
        email="a@x.com",
        first_name="Ada",
        last_name="Lovelace",
        created_by=owner.user_id,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@pytest.fixture
def unowned_email(db: Session) -> AddedEmail:
    """An entry with no recorded creator"""
    record = AddedEmail(email="system@x.com", created_by=None)
    db.add(record)
    db.commit()
    db.refresh(record)
    return record
