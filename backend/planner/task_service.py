# backend/planner/task_service.py
import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from . import mappers, schemas
from .config import DEADLINE_TOLERANCE_MINUTES
from .errors import ValidationError
from .repositories import SubjectRepository, TaskRepository
from .task_query import TaskCriteria
from .utils import to_local_naive

logger = logging.getLogger(__name__)

SUBJECT_NOT_FOUND = "Selected subject not found or access denied."
TASK_NOT_FOUND = "Task not found or access denied."
UPCOMING_DAYS = 7


class TaskService:
    def __init__(self, db: Session, deadline_tolerance: timedelta = timedelta(minutes=DEADLINE_TOLERANCE_MINUTES)):
        self.tasks = TaskRepository(db)
        self.subjects = SubjectRepository(db)
        self.deadline_tolerance = deadline_tolerance

    # ---------- queries ----------

    def get_tasks(
        self, student_id: str, criteria: Optional[TaskCriteria] = None, now: Optional[datetime] = None
    ) -> List[schemas.TaskOut]:
        now = now or datetime.now()
        return mappers.tasks_to_dtos(self.tasks.list_by_student(student_id, criteria, now), now)

    def get_tasks_by_subject(self, student_id: str, subject_id: str) -> List[schemas.TaskOut]:
        return mappers.tasks_to_dtos(self.tasks.list_by_subject(student_id, subject_id))

    def get_overdue_tasks(self, student_id: str, now: Optional[datetime] = None) -> List[schemas.TaskOut]:
        now = now or datetime.now()
        return mappers.tasks_to_dtos(self.tasks.list_overdue(student_id, now), now)

    def get_today_tasks(self, student_id: str, now: Optional[datetime] = None) -> List[schemas.TaskOut]:
        now = now or datetime.now()
        return mappers.tasks_to_dtos(self.tasks.list_today(student_id, now), now)

    def get_upcoming_tasks(
        self, student_id: str, days: int = UPCOMING_DAYS, now: Optional[datetime] = None
    ) -> List[schemas.TaskOut]:
        now = now or datetime.now()
        return mappers.tasks_to_dtos(self.tasks.list_upcoming(student_id, days, now), now)

    def get_task(self, task_id: str, student_id: str) -> Optional[schemas.TaskOut]:
        task = self.tasks.get_by_id(task_id, student_id)
        return mappers.task_to_dto(task) if task is not None else None

    def task_exists(self, task_id: str, student_id: str) -> bool:
        return self.tasks.exists(task_id, student_id)

    # ---------- mutations ----------

    def _check_subject(self, subject_id: Optional[str], student_id: str) -> None:
        if subject_id is not None and not self.subjects.exists(subject_id, student_id):
            logger.warning("Subject %s rejected for student %s", subject_id, student_id)
            raise ValidationError(SUBJECT_NOT_FOUND)

    def create_task(
        self, student_id: str, data: schemas.TaskCreate, now: Optional[datetime] = None
    ) -> schemas.TaskOut:
        now = now or datetime.now()
        self._check_subject(data.subject_id, student_id)

        deadline = to_local_naive(data.deadline)
        if deadline < now - self.deadline_tolerance:
            raise ValidationError("Deadline cannot be in the past.")

        task = mappers.task_from_create(student_id, data)
        task.deadline = deadline
        task = self.tasks.create(task)
        logger.info("Created task %s for student %s", task.id, student_id)
        return mappers.task_to_dto(task, now)

    def update_task(self, student_id: str, task_id: str, data: schemas.TaskUpdate) -> schemas.TaskOut:
        # no past-deadline check here: existing tasks may keep or move to an old deadline
        task = self.tasks.get_by_id(task_id, student_id)
        if task is None:
            raise ValidationError(TASK_NOT_FOUND)

        self._check_subject(data.subject_id, student_id)

        mappers.apply_task_update(task, data)
        task.deadline = to_local_naive(data.deadline)
        task = self.tasks.update(task)
        logger.info("Updated task %s", task_id)
        return mappers.task_to_dto(task)

    def delete_task(self, task_id: str, student_id: str) -> bool:
        deleted = self.tasks.delete(task_id, student_id)
        if deleted:
            logger.info("Deleted task %s", task_id)
        return deleted

    def toggle_task_status(self, task_id: str, student_id: str) -> bool:
        task = self.tasks.get_by_id(task_id, student_id)
        if task is None:
            return False
        task.is_done = not task.is_done
        self.tasks.update(task)
        logger.info("Task %s is_done -> %s", task_id, task.is_done)
        return True
