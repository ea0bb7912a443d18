# backend/planner/main.py
import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from jose import JWTError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import auth, mappers, models, schemas
from .config import CORS_ORIGINS
from .dashboard_service import DashboardService
from .database import SessionLocal, init_db
from .errors import SubjectInUseError, ValidationError
from .logging_setup import setup_logging
from .student_service import StudentService
from .subject_service import SubjectService
from .task_query import TaskCriteria
from .task_service import UPCOMING_DAYS, TaskService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    init_db()
    logger.info("Study planner started")
    yield


app = FastAPI(title="Study Planner", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token")


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "A database error occurred. Please try again."})


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_student(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> models.Student:
    try:
        student_id = auth.decode_access_token(token)
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")
    student = StudentService(db).get(student_id)
    if student is None:
        raise HTTPException(status_code=401, detail="Student not found")
    return student


def _bad_request(exc: ValidationError) -> HTTPException:
    return HTTPException(status_code=400, detail=str(exc))


# ---------- accounts ----------

@app.post("/register", response_model=schemas.AuthResult, status_code=201)
def register_student(dto: schemas.StudentRegister, db: Session = Depends(get_db)):
    result = StudentService(db).register(dto)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.error_message)
    return result


@app.post("/token", response_model=schemas.Token)
def login_for_access_token(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    result = StudentService(db).login(form_data.username, form_data.password)
    if not result.success:
        raise HTTPException(status_code=401, detail=result.error_message)
    return {"access_token": result.token, "token_type": "bearer"}


@app.get("/me", response_model=schemas.StudentOut)
def read_me(current: models.Student = Depends(get_current_student)):
    return mappers.student_to_dto(current)


# ---------- dashboard ----------

@app.get("/dashboard", response_model=schemas.DashboardOut)
def read_dashboard(current: models.Student = Depends(get_current_student), db: Session = Depends(get_db)):
    return DashboardService(db).build_dashboard(current.id)


@app.post("/dashboard/tasks/{task_id}/done", response_model=schemas.ActionResult)
def mark_task_done(
    task_id: str, current: models.Student = Depends(get_current_student), db: Session = Depends(get_db)
):
    if not DashboardService(db).mark_task_done(task_id, current.id):
        raise HTTPException(status_code=404, detail="Task not found or access denied")
    return {"success": True}


# ---------- tasks ----------

@app.get("/tasks", response_model=List[schemas.TaskOut])
def list_tasks(
    search_term: Optional[str] = None,
    subject_id: Optional[str] = None,
    status: schemas.TaskStatus = schemas.TaskStatus.all,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    sort_by: schemas.TaskSortBy = schemas.TaskSortBy.deadline,
    sort_order: schemas.SortOrder = schemas.SortOrder.asc,
    current: models.Student = Depends(get_current_student),
    db: Session = Depends(get_db),
):
    criteria = TaskCriteria(
        search_term=search_term,
        subject_id=subject_id,
        status=status,
        from_date=from_date,
        to_date=to_date,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return TaskService(db).get_tasks(current.id, criteria)


@app.get("/tasks/overdue", response_model=List[schemas.TaskOut])
def list_overdue_tasks(current: models.Student = Depends(get_current_student), db: Session = Depends(get_db)):
    return TaskService(db).get_overdue_tasks(current.id)


@app.get("/tasks/today", response_model=List[schemas.TaskOut])
def list_today_tasks(current: models.Student = Depends(get_current_student), db: Session = Depends(get_db)):
    return TaskService(db).get_today_tasks(current.id)


@app.get("/tasks/upcoming", response_model=List[schemas.TaskOut])
def list_upcoming_tasks(
    days: int = Query(UPCOMING_DAYS, ge=1, le=365),
    current: models.Student = Depends(get_current_student),
    db: Session = Depends(get_db),
):
    return TaskService(db).get_upcoming_tasks(current.id, days)


@app.post("/tasks", response_model=schemas.TaskOut, status_code=201)
def create_task(
    dto: schemas.TaskCreate, current: models.Student = Depends(get_current_student), db: Session = Depends(get_db)
):
    try:
        return TaskService(db).create_task(current.id, dto)
    except ValidationError as exc:
        raise _bad_request(exc)


@app.get("/tasks/{task_id}", response_model=schemas.TaskOut)
def read_task(task_id: str, current: models.Student = Depends(get_current_student), db: Session = Depends(get_db)):
    task = TaskService(db).get_task(task_id, current.id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found.")
    return task


@app.put("/tasks/{task_id}", response_model=schemas.TaskOut)
def update_task(
    task_id: str,
    dto: schemas.TaskUpdate,
    current: models.Student = Depends(get_current_student),
    db: Session = Depends(get_db),
):
    try:
        return TaskService(db).update_task(current.id, task_id, dto)
    except ValidationError as exc:
        raise _bad_request(exc)


@app.delete("/tasks/{task_id}", response_model=schemas.ActionResult)
def delete_task(task_id: str, current: models.Student = Depends(get_current_student), db: Session = Depends(get_db)):
    if not TaskService(db).delete_task(task_id, current.id):
        raise HTTPException(status_code=404, detail="Task not found.")
    return {"success": True, "message": "Task deleted successfully!"}


@app.post("/tasks/{task_id}/toggle", response_model=schemas.ActionResult)
def toggle_task(task_id: str, current: models.Student = Depends(get_current_student), db: Session = Depends(get_db)):
    if not TaskService(db).toggle_task_status(task_id, current.id):
        raise HTTPException(status_code=404, detail="Task not found.")
    return {"success": True, "message": "Task status updated successfully!"}


# ---------- subjects ----------

@app.get("/subjects", response_model=List[schemas.SubjectOut])
def list_subjects(current: models.Student = Depends(get_current_student), db: Session = Depends(get_db)):
    return SubjectService(db).list_subjects(current.id)


@app.post("/subjects", response_model=schemas.SubjectOut, status_code=201)
def create_subject(
    dto: schemas.SubjectCreate, current: models.Student = Depends(get_current_student), db: Session = Depends(get_db)
):
    try:
        return SubjectService(db).create_subject(current.id, dto)
    except ValidationError as exc:
        raise _bad_request(exc)


@app.get("/subjects/{subject_id}", response_model=schemas.SubjectOut)
def read_subject(
    subject_id: str, current: models.Student = Depends(get_current_student), db: Session = Depends(get_db)
):
    subject = SubjectService(db).get_subject(subject_id, current.id)
    if subject is None:
        raise HTTPException(status_code=404, detail="Subject not found.")
    return subject


@app.get("/subjects/{subject_id}/tasks", response_model=List[schemas.TaskOut])
def list_subject_tasks(
    subject_id: str, current: models.Student = Depends(get_current_student), db: Session = Depends(get_db)
):
    if not SubjectService(db).subject_exists(subject_id, current.id):
        raise HTTPException(status_code=404, detail="Subject not found.")
    return TaskService(db).get_tasks_by_subject(current.id, subject_id)


@app.put("/subjects/{subject_id}", response_model=schemas.SubjectOut)
def update_subject(
    subject_id: str,
    dto: schemas.SubjectUpdate,
    current: models.Student = Depends(get_current_student),
    db: Session = Depends(get_db),
):
    try:
        return SubjectService(db).update_subject(current.id, subject_id, dto)
    except ValidationError as exc:
        raise _bad_request(exc)


@app.delete("/subjects/{subject_id}", response_model=schemas.ActionResult)
def delete_subject(
    subject_id: str, current: models.Student = Depends(get_current_student), db: Session = Depends(get_db)
):
    try:
        deleted = SubjectService(db).delete_subject(subject_id, current.id)
    except SubjectInUseError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    if not deleted:
        raise HTTPException(status_code=404, detail="Subject not found.")
    return {"success": True, "message": "Subject deleted successfully!"}
