import os
import sys

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from taskbell import models  # noqa: E402,F401
from taskbell.api import deps  # noqa: E402
from taskbell.api.notifications import router as notifications_router  # noqa: E402
from taskbell.api.todos import router as todos_router  # noqa: E402
from taskbell.database import Base  # noqa: E402


@pytest.fixture()
def session_factory():
    """Fresh in-memory database shared by every session of one test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def api_app(session_factory) -> FastAPI:
    app = FastAPI()
    app.include_router(todos_router, prefix="/api")
    app.include_router(notifications_router, prefix="/api")

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[deps.get_db] = override_get_db
    return app


@pytest.fixture()
def client(api_app) -> TestClient:
    return TestClient(api_app)
