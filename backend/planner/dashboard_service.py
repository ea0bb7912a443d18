# backend/planner/dashboard_service.py
"""
Dashboard summary over a student's full task list.

The list is read once and every figure is derived from that one snapshot:
- today: open tasks due in [midnight today, midnight tomorrow)
- upcoming: open tasks due from midnight tomorrow on
- open tasks due before today's midnight appear in neither bucket
- progress = completed / total * 100, one decimal, 0 for no tasks
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from . import mappers, schemas
from .repositories import TaskRepository
from .utils import start_of_day

logger = logging.getLogger(__name__)


def progress_percentage(completed: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return round(completed / total * 100, 1)


class DashboardService:
    def __init__(self, db: Session):
        self.tasks = TaskRepository(db)

    def build_dashboard(self, student_id: str, now: Optional[datetime] = None) -> schemas.DashboardOut:
        now = now or datetime.now()
        today = start_of_day(now)
        tomorrow = today + timedelta(days=1)

        all_tasks = mappers.tasks_to_dtos(self.tasks.list_by_student(student_id, now=now), now)
        pending = [t for t in all_tasks if not t.is_done]

        today_tasks = sorted((t for t in pending if today <= t.deadline < tomorrow), key=lambda t: t.deadline)
        upcoming_tasks = sorted((t for t in pending if t.deadline >= tomorrow), key=lambda t: t.deadline)

        total = len(all_tasks)
        completed = sum(1 for t in all_tasks if t.is_done)

        return schemas.DashboardOut(
            today_tasks=today_tasks,
            upcoming_tasks=upcoming_tasks,
            total_tasks=total,
            completed_tasks=completed,
            progress_percentage=progress_percentage(completed, total),
            has_no_tasks=total == 0,
        )

    def mark_task_done(self, task_id: str, student_id: str) -> bool:
        """Set is_done on an owned task. Already-done tasks still report True."""
        task = self.tasks.get_by_id(task_id, student_id)
        if task is None:
            return False
        if task.is_done:
            return True
        task.is_done = True
        self.tasks.update(task)
        logger.info("Task %s marked done from dashboard", task_id)
        return True
