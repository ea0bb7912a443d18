# backend/planner/task_query.py
"""
Task search: an explicit criteria object and one function that turns it into a query.

Clauses are always applied in the same order:
student scope, search term, subject, status, from-date, to-date, ordering.
Equal sort keys are broken by task id (ascending) so results are deterministic.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Query, Session, contains_eager

from . import models
from .schemas import SortOrder, TaskSortBy, TaskStatus
from .utils import end_of_day_exclusive, start_of_day


@dataclass
class TaskCriteria:
    search_term: Optional[str] = None
    subject_id: Optional[str] = None
    status: TaskStatus = TaskStatus.all
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    sort_by: TaskSortBy = TaskSortBy.deadline
    sort_order: SortOrder = SortOrder.asc


def _sort_column(sort_by: TaskSortBy):
    if sort_by == TaskSortBy.title:
        return models.Task.title
    if sort_by == TaskSortBy.created_at:
        return models.Task.created_at
    if sort_by == TaskSortBy.subject:
        return func.coalesce(models.Subject.name, "")
    return models.Task.deadline


def build_task_query(
    db: Session,
    student_id: str,
    criteria: Optional[TaskCriteria] = None,
    now: Optional[datetime] = None,
) -> Query:
    criteria = criteria or TaskCriteria()
    now = now or datetime.now()
    Task = models.Task

    q = (
        db.query(Task)
        .outerjoin(models.Subject, Task.subject_id == models.Subject.id)
        .options(contains_eager(Task.subject))
        .filter(Task.student_id == student_id)
    )

    term = (criteria.search_term or "").strip().lower()
    if term:
        q = q.filter(
            func.lower(Task.title).contains(term, autoescape=True)
            | func.lower(Task.description).contains(term, autoescape=True)
        )

    if criteria.subject_id:
        q = q.filter(Task.subject_id == criteria.subject_id)

    status = TaskStatus(criteria.status) if criteria.status else TaskStatus.all
    if status == TaskStatus.completed:
        q = q.filter(Task.is_done.is_(True))
    elif status == TaskStatus.pending:
        q = q.filter(Task.is_done.is_(False), Task.deadline >= now)
    elif status == TaskStatus.overdue:
        q = q.filter(Task.is_done.is_(False), Task.deadline < now)

    if criteria.from_date is not None:
        q = q.filter(Task.deadline >= start_of_day(criteria.from_date))
    if criteria.to_date is not None:
        q = q.filter(Task.deadline < end_of_day_exclusive(criteria.to_date))

    col = _sort_column(TaskSortBy(criteria.sort_by))
    primary = col.desc() if SortOrder(criteria.sort_order) == SortOrder.desc else col.asc()
    return q.order_by(primary, Task.id.asc())


def search_tasks(
    db: Session,
    student_id: str,
    criteria: Optional[TaskCriteria] = None,
    now: Optional[datetime] = None,
) -> List[models.Task]:
    return build_task_query(db, student_id, criteria, now).all()
