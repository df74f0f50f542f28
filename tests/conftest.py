# tests/conftest.py

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from eventhub.core.limiter import limiter
from eventhub.db.base import Base
from eventhub.db.session import get_db
from eventhub.main import app

# --- Test Database Setup ---
# One in-memory SQLite database shared by every connection of the test engine.
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """
    TestClient wired to the test database. The lifespan handler is not run,
    so nothing touches the configured database.
    """

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    limiter.reset()

    yield TestClient(app)

    app.dependency_overrides.clear()
