import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient #fake http client that calls the FastAPI routes without a running server
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from campusgrid.api.deps import get_db
from campusgrid.db.base import Base
from campusgrid.main import app
from campusgrid.models import Lecture, Subject


@pytest.fixture()
def session_factory():
    engine = create_engine( #isolated in-memory DB shared by the client and the seeding helpers
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
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


@pytest.fixture()
def seed_timetable(db_session):
    dbms = Subject(id="sub-dbms", code="CE263", name="DBMS")
    os_subject = Subject(id="sub-os", code="CE264", name="Operating Systems")
    db_session.add_all([dbms, os_subject])
    db_session.add_all(
        [
            Lecture(
                id="lec-mon-1",
                day="Monday",
                type="Lecture",
                subject_id="sub-dbms",
                faculty_id="fac-1",
                division="A",
                semester=5,
                from_time="04:30:00+00",
                to_time="05:29:00+00",
                location="A-101",
            ),
            Lecture(
                id="lec-mon-lab",
                day="Monday",
                type="Lab",
                subject_id="sub-os",
                faculty_id="fac-1",
                division="A",
                batch="A1",
                semester=5,
                from_time="06:30:00+00",
                to_time="07:40:00+00",
                location="Lab-2",
            ),
            Lecture(
                id="lec-tue-1",
                day="Tuesday",
                type="Lecture",
                subject_id="sub-dbms",
                faculty_id="fac-2",
                division="B",
                semester=5,
                from_time="03:40:00+00",
                to_time="04:39:00+00",
            ),
            Lecture(
                id="lec-free",
                day="Wednesday",
                type="Lecture",
                subject_id=None,
                faculty_id="fac-1",
                from_time="07:40:00+00",
                to_time="08:39:00+00",
            ),
        ]
    )
    db_session.commit()
    return db_session
