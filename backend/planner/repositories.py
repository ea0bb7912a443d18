# backend/planner/repositories.py
"""
Database access for students, subjects and tasks.

Every subject/task lookup takes the owning student id; a row that belongs to
someone else is simply not found. Repositories assign ids and timestamps and
commit their own writes.
"""

from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from . import models
from .task_query import TaskCriteria, search_tasks
from .utils import normalize_email, start_of_day, subject_name_key, utcnow


class StudentRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, student_id: str) -> Optional[models.Student]:
        return self.db.get(models.Student, student_id)

    def get_by_email(self, email: str) -> Optional[models.Student]:
        return (
            self.db.query(models.Student)
            .filter(models.Student.email == normalize_email(email))
            .first()
        )

    def create(self, student: models.Student) -> models.Student:
        student.id = models.new_id()
        student.email = normalize_email(student.email)
        student.created_at = student.updated_at = utcnow()
        self.db.add(student)
        self.db.commit()
        self.db.refresh(student)
        return student


class SubjectRepository:
    def __init__(self, db: Session):
        self.db = db

    def _owned(self, student_id: str):
        return (
            self.db.query(models.Subject)
            .options(selectinload(models.Subject.tasks))
            # tasks may have been linked by subject_id only; reload the collection
            .populate_existing()
            .filter(models.Subject.student_id == student_id)
        )

    def list_by_student(self, student_id: str) -> List[models.Subject]:
        return self._owned(student_id).order_by(models.Subject.name, models.Subject.id).all()

    def get_by_id(self, subject_id: str, student_id: str) -> Optional[models.Subject]:
        return self._owned(student_id).filter(models.Subject.id == subject_id).first()

    def exists(self, subject_id: str, student_id: str) -> bool:
        q = self.db.query(models.Subject.id).filter(
            models.Subject.id == subject_id, models.Subject.student_id == student_id
        )
        return self.db.query(q.exists()).scalar()

    def name_exists(self, name: str, student_id: str, exclude_id: Optional[str] = None) -> bool:
        q = self.db.query(models.Subject.id).filter(
            models.Subject.student_id == student_id,
            models.Subject.name_key == subject_name_key(name),
        )
        if exclude_id is not None:
            q = q.filter(models.Subject.id != exclude_id)
        return self.db.query(q.exists()).scalar()

    def create(self, subject: models.Subject) -> models.Subject:
        subject.id = models.new_id()
        subject.name_key = subject_name_key(subject.name)
        subject.created_at = subject.updated_at = utcnow()
        self.db.add(subject)
        self.db.commit()
        self.db.refresh(subject)
        return subject

    def update(self, subject: models.Subject) -> models.Subject:
        subject.name_key = subject_name_key(subject.name)
        subject.updated_at = utcnow()
        self.db.add(subject)
        self.db.commit()
        self.db.refresh(subject)
        return subject

    def delete(self, subject_id: str, student_id: str) -> bool:
        subject = self.get_by_id(subject_id, student_id)
        if subject is None:
            return False
        self.db.delete(subject)
        self.db.commit()
        return True


class TaskRepository:
    def __init__(self, db: Session):
        self.db = db

    def _owned(self, student_id: str):
        return (
            self.db.query(models.Task)
            .options(joinedload(models.Task.subject))
            .filter(models.Task.student_id == student_id)
        )

    def list_by_student(
        self,
        student_id: str,
        criteria: Optional[TaskCriteria] = None,
        now: Optional[datetime] = None,
    ) -> List[models.Task]:
        return search_tasks(self.db, student_id, criteria, now)

    def list_by_subject(self, student_id: str, subject_id: str) -> List[models.Task]:
        return (
            self._owned(student_id)
            .filter(models.Task.subject_id == subject_id)
            .order_by(models.Task.deadline, models.Task.id)
            .all()
        )

    def list_overdue(self, student_id: str, now: Optional[datetime] = None) -> List[models.Task]:
        now = now or datetime.now()
        return (
            self._owned(student_id)
            .filter(models.Task.is_done.is_(False), models.Task.deadline < now)
            .order_by(models.Task.deadline, models.Task.id)
            .all()
        )

    def list_today(self, student_id: str, now: Optional[datetime] = None) -> List[models.Task]:
        """Every task due between today's midnight and tomorrow's, done or not."""
        today = start_of_day(now or datetime.now())
        return (
            self._owned(student_id)
            .filter(models.Task.deadline >= today, models.Task.deadline < today + timedelta(days=1))
            .order_by(models.Task.deadline, models.Task.id)
            .all()
        )

    def list_upcoming(self, student_id: str, days: int = 7, now: Optional[datetime] = None) -> List[models.Task]:
        """Open tasks due after today's midnight, up to and including midnight `days` days later."""
        today = start_of_day(now or datetime.now())
        return (
            self._owned(student_id)
            .filter(
                models.Task.is_done.is_(False),
                models.Task.deadline > today,
                models.Task.deadline <= today + timedelta(days=days),
            )
            .order_by(models.Task.deadline, models.Task.id)
            .all()
        )

    def get_by_id(self, task_id: str, student_id: str) -> Optional[models.Task]:
        return self._owned(student_id).filter(models.Task.id == task_id).first()

    def exists(self, task_id: str, student_id: str) -> bool:
        q = self.db.query(models.Task.id).filter(
            models.Task.id == task_id, models.Task.student_id == student_id
        )
        return self.db.query(q.exists()).scalar()

    def create(self, task: models.Task) -> models.Task:
        task.id = models.new_id()
        task.created_at = task.updated_at = utcnow()
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        return task

    def update(self, task: models.Task) -> models.Task:
        task.updated_at = utcnow()
        self.db.add(task)
        self.db.commit()
        # reload so a changed subject_id is reflected in task.subject
        self.db.expire(task, ["subject"])
        self.db.refresh(task)
        return task

    def delete(self, task_id: str, student_id: str) -> bool:
        task = self.get_by_id(task_id, student_id)
        if task is None:
            return False
        self.db.delete(task)
        self.db.commit()
        return True
