import os

os.environ.setdefault("ENV", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import engagement.models  # noqa: F401
from engagement.db import Base, get_db
from engagement.main import create_app
from engagement.routers.utils.dependencies import get_interest_analyzer

pytest_plugins = [
    "tests.fixtures.agent_assignment_fixtures",
    "tests.fixtures.contact_analytics_fixtures",
    "tests.fixtures.llm_fixtures",
    "tests.fixtures.qualification_fixtures",
]


@pytest.fixture(scope="function")
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def other_db(engine):
    """A second session on the same database, standing in for a concurrent worker."""
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def app(db, analyzer):
    app = create_app(testing=True)

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_interest_analyzer] = lambda: analyzer
    return app


@pytest.fixture(scope="function")
def client(app):
    with TestClient(app) as test_client:
        yield test_client
