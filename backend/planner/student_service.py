# backend/planner/student_service.py
import logging
from typing import List

from sqlalchemy.orm import Session

from . import auth, models, schemas
from .repositories import StudentRepository
from .utils import MIN_PASSWORD_LENGTH, is_email_valid, is_password_valid

logger = logging.getLogger(__name__)


def validate_registration(dto: schemas.StudentRegister) -> List[str]:
    errors = []
    if not dto.email or not dto.email.strip():
        errors.append("Email is required.")
    elif not is_email_valid(dto.email):
        errors.append("Email format is invalid.")

    if not dto.full_name or not dto.full_name.strip():
        errors.append("Full name is required.")

    if not dto.password or not dto.password.strip():
        errors.append("Password is required.")
    elif not is_password_valid(dto.password):
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")

    if dto.password != dto.confirm_password:
        errors.append("Passwords do not match.")
    return errors


class StudentService:
    def __init__(self, db: Session):
        self.students = StudentRepository(db)
        self.db = db

    def _success(self, student: models.Student) -> schemas.AuthResult:
        token = auth.create_access_token(student.id, student.email, student.full_name)
        return schemas.AuthResult(
            success=True, token=token, student_id=student.id, student_name=student.full_name
        )

    def register(self, dto: schemas.StudentRegister) -> schemas.AuthResult:
        errors = validate_registration(dto)
        if errors:
            return schemas.AuthResult(success=False, error_message=", ".join(errors))

        if self.students.get_by_email(dto.email) is not None:
            logger.info("Registration rejected: email already in use")
            return schemas.AuthResult(success=False, error_message="Account with this email already exists.")

        student = self.students.create(
            models.Student(
                email=dto.email,
                full_name=dto.full_name.strip(),
                password_hash=auth.get_password_hash(dto.password),
            )
        )
        logger.info("Registered student %s", student.id)
        return self._success(student)

    def login(self, email: str, password: str) -> schemas.AuthResult:
        student = auth.authenticate_student(self.db, email or "", password or "")
        if student is None:
            return schemas.AuthResult(success=False, error_message="Invalid email or password.")
        return self._success(student)

    def get(self, student_id: str):
        return self.students.get_by_id(student_id)
