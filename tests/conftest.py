import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("INVITE_LINK_REFRESH_ENABLED", "false")
os.environ.setdefault("LOG_FILE", os.path.join(tempfile.gettempdir(), "budget_planner_tests.log"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.database import Base, get_db
from app.dashboards import service as dashboard_service
from app.dashboards.catalog import seed_catalog
from app.dashboards.schemas import DashboardCreate
from app.users import crud as user_crud
from app.users.auth import create_access_token
from app.users.schemas import UserSchema


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = TestingSession()
    seed_catalog(session)
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make_user(username, password="secret"):
        return user_crud.create_user(
            db,
            UserSchema(username=username, email=f"{username}@budget.io", password=password),
        )

    return _make_user


@pytest.fixture
def make_dashboard(db):
    def _make_dashboard(owner, title="Household"):
        return dashboard_service.create_dashboard(db, owner.id, DashboardCreate(title=title))

    return _make_dashboard


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        token = create_access_token({"sub": user.username})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
