# backend/planner/mappers.py
"""
Entity -> transfer object conversions.

One function per entity pair, every field copied explicitly. Derived fields
(overdue flag, status text, subject counts) are computed here.
"""

from datetime import datetime
from typing import Iterable, List, Optional

from . import models, schemas


def task_status_text(is_done: bool, is_overdue: bool) -> str:
    if is_done:
        return "Completed"
    return "Overdue" if is_overdue else "Pending"


def task_to_dto(task: models.Task, now: Optional[datetime] = None) -> schemas.TaskOut:
    now = now or datetime.now()
    is_overdue = not task.is_done and task.deadline < now
    return schemas.TaskOut(
        id=task.id,
        student_id=task.student_id,
        title=task.title,
        description=task.description,
        deadline=task.deadline,
        is_done=bool(task.is_done),
        subject_id=task.subject_id,
        subject_name=task.subject.name if task.subject is not None else None,
        created_at=task.created_at,
        updated_at=task.updated_at,
        is_overdue=is_overdue,
        status_text=task_status_text(bool(task.is_done), is_overdue),
    )


def tasks_to_dtos(tasks: Iterable[models.Task], now: Optional[datetime] = None) -> List[schemas.TaskOut]:
    now = now or datetime.now()
    return [task_to_dto(t, now) for t in tasks]


def task_to_summary(task: models.Task) -> schemas.SubjectTaskSummary:
    return schemas.SubjectTaskSummary(
        id=task.id,
        title=task.title,
        is_done=bool(task.is_done),
        deadline=task.deadline,
    )


def subject_to_dto(subject: models.Subject) -> schemas.SubjectOut:
    tasks = list(subject.tasks)
    return schemas.SubjectOut(
        id=subject.id,
        student_id=subject.student_id,
        name=subject.name,
        description=subject.description,
        created_at=subject.created_at,
        updated_at=subject.updated_at,
        task_count=len(tasks),
        completed_task_count=sum(1 for t in tasks if t.is_done),
        tasks=[task_to_summary(t) for t in tasks],
    )


def student_to_dto(student: models.Student) -> schemas.StudentOut:
    return schemas.StudentOut(
        id=student.id,
        email=student.email,
        full_name=student.full_name,
        created_at=student.created_at,
    )


def task_from_create(student_id: str, data: schemas.TaskCreate) -> models.Task:
    return models.Task(
        student_id=student_id,
        subject_id=data.subject_id,
        title=data.title,
        description=data.description,
        deadline=data.deadline,
        is_done=False,
    )


def apply_task_update(task: models.Task, data: schemas.TaskUpdate) -> models.Task:
    task.title = data.title
    task.description = data.description
    task.deadline = data.deadline
    task.is_done = data.is_done
    task.subject_id = data.subject_id
    return task


def subject_from_create(student_id: str, data: schemas.SubjectCreate) -> models.Subject:
    return models.Subject(student_id=student_id, name=data.name, description=data.description)
