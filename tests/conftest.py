import os

# Must be set before the app modules build their engine.
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from database import Base, SessionLocal, engine, get_db
from main import app
from models import Courses, Students


class FailingSession:
    """Stands in for a session whose database has gone away."""

    def __init__(self, error=None):
        self.error = error or OperationalError("SELECT 1", {}, Exception("database is unavailable"))

    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise self.error
        return fail

    def rollback(self):
        pass

    def close(self):
        pass


@pytest.fixture(autouse=True)
def reset_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db_session():
    db = SessionLocal()
    yield db
    db.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def break_db():
    def _break(error=None):
        app.dependency_overrides[get_db] = lambda: FailingSession(error)
    return _break


@pytest.fixture
def failing_client(client, break_db):
    break_db()
    return client


@pytest.fixture
def make_course(db_session):
    def _make(code, title=None, credits=3):
        course = Courses(code=code, title=title or f"Course {code}", credits=credits)
        db_session.add(course)
        db_session.commit()
        return course.id
    return _make


@pytest.fixture
def make_student(db_session):
    def _make(name="Ada Lovelace", email=None, age=None, course_ids=()):
        courses = [db_session.get(Courses, cid) for cid in course_ids]
        student = Students(name=name, email=email, age=age, courses=courses)
        db_session.add(student)
        db_session.commit()
        return student.id
    return _make


@pytest.fixture
def server_error_client():
    # unhandled errors are re-raised by the server middleware after the 500 is sent
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
    app.dependency_overrides.clear()
