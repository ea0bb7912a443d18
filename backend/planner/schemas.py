# backend/planner/schemas.py
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class TaskStatus(str, Enum):
    all = "all"
    pending = "pending"
    completed = "completed"
    overdue = "overdue"


class TaskSortBy(str, Enum):
    title = "title"
    deadline = "deadline"
    created_at = "created_at"
    subject = "subject"


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"


# ---------- accounts ----------

class StudentRegister(BaseModel):
    # validated by student_service so every problem is reported at once
    email: str = ""
    full_name: str = ""
    password: str = ""
    confirm_password: str = ""


class StudentOut(BaseModel):
    id: str
    email: EmailStr
    full_name: str
    created_at: datetime


class Token(BaseModel):
    access_token: str
    token_type: str


class AuthResult(BaseModel):
    success: bool
    token: Optional[str] = None
    student_id: Optional[str] = None
    student_name: Optional[str] = None
    error_message: Optional[str] = None


# ---------- subjects ----------

class SubjectCreate(BaseModel):
    # stored names carry no surrounding whitespace; length limits apply after stripping
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


class SubjectUpdate(SubjectCreate):
    pass


class SubjectTaskSummary(BaseModel):
    id: str
    title: str
    is_done: bool
    deadline: datetime


class SubjectOut(BaseModel):
    id: str
    student_id: str
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    task_count: int = 0
    completed_task_count: int = 0
    tasks: List[SubjectTaskSummary] = []


# ---------- tasks ----------

class TaskCreate(BaseModel):
    title: str = Field(..., min_length=2, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    deadline: datetime
    subject_id: Optional[str] = None


class TaskUpdate(TaskCreate):
    is_done: bool = False


class TaskOut(BaseModel):
    id: str
    student_id: str
    title: str
    description: Optional[str] = None
    deadline: datetime
    is_done: bool
    subject_id: Optional[str] = None
    subject_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    is_overdue: bool = False
    status_text: str = "Pending"


class DashboardOut(BaseModel):
    today_tasks: List[TaskOut] = []
    upcoming_tasks: List[TaskOut] = []
    total_tasks: int = 0
    completed_tasks: int = 0
    progress_percentage: float = 0.0
    has_no_tasks: bool = True


class ActionResult(BaseModel):
    success: bool
    message: Optional[str] = None
