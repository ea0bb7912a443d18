# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from planner import models
from planner.database import Base, make_engine
from planner.main import app, get_db
from planner.repositories import StudentRepository, SubjectRepository, TaskRepository

# A fixed "now" keeps day-boundary tests deterministic.
NOW = datetime(2026, 3, 10, 12, 0, 0)


@pytest.fixture()
def engine():
    """
    In-memory SQLite shared by every session of one test.

    StaticPool keeps a single connection so the TestClient worker thread
    sees the same database as the test body.
    """
    eng = make_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def db(session_factory) -> Session:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_student(db: Session) -> Callable[..., models.Student]:
    """Insert a student directly (no password hashing, these never log in)."""
    counter = {"n": 0}

    def _make(email: Optional[str] = None, full_name: str = "Test Student") -> models.Student:
        counter["n"] += 1
        email = email or f"student{counter['n']}@school.edu"
        return StudentRepository(db).create(
            models.Student(email=email, full_name=full_name, password_hash="not-a-real-hash")
        )

    return _make


@pytest.fixture()
def make_subject(db: Session) -> Callable[..., models.Subject]:
    def _make(student: models.Student, name: str, description: Optional[str] = None) -> models.Subject:
        return SubjectRepository(db).create(
            models.Subject(student_id=student.id, name=name, description=description)
        )

    return _make


@pytest.fixture()
def add_task(db: Session) -> Callable[..., models.Task]:
    """
    Insert a task through the repository, bypassing service validation,
    so tests can place deadlines anywhere relative to NOW.
    """

    def _add(
        student: models.Student,
        title: str,
        deadline: datetime,
        *,
        is_done: bool = False,
        subject: Optional[models.Subject] = None,
        description: Optional[str] = None,
    ) -> models.Task:
        return TaskRepository(db).create(
            models.Task(
                student_id=student.id,
                subject_id=subject.id if subject is not None else None,
                title=title,
                description=description,
                deadline=deadline,
                is_done=is_done,
            )
        )

    return _add


@pytest.fixture()
def client(session_factory) -> TestClient:
    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
