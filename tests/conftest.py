import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FILE"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from db import get_db
from main import app
from models import Base


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def allocation(a, b, c, d):
    return {"A": a, "B": b, "C": c, "D": d}


@pytest.fixture
def make_payload():
    def _make(email="jane.doe@acme.com", responses=None, **extra):
        payload = {
            "userDetails": {
                "fullName": "Jane Doe",
                "email": email,
                "designation": "Senior Management (e.g., Director, VP)",
                "officeTypology": "HQ",
                "cohortTeam": "Finance",
                "company": "Acme",
            },
            "questionResponses": responses if responses is not None else [
                {
                    "questionId": 1,
                    "questionTitle": "Dominant Characteristics",
                    "currentState": allocation(40, 30, 20, 10),
                    "aspirationalState": allocation(10, 20, 30, 40),
                },
                {
                    "questionId": 2,
                    "questionTitle": "Organisational Leadership",
                    "currentState": allocation(0, 0, 100, 0),
                    "aspirationalState": allocation(55, 45, 0, 0),
                },
            ],
            "completionTime": 120,
        }
        payload.update(extra)
        return payload

    return _make
