# backend/planner/subject_service.py
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from . import mappers, schemas
from .errors import SubjectInUseError, ValidationError
from .repositories import SubjectRepository

logger = logging.getLogger(__name__)


class SubjectService:
    def __init__(self, db: Session):
        self.subjects = SubjectRepository(db)

    def list_subjects(self, student_id: str) -> List[schemas.SubjectOut]:
        return [mappers.subject_to_dto(s) for s in self.subjects.list_by_student(student_id)]

    def get_subject(self, subject_id: str, student_id: str) -> Optional[schemas.SubjectOut]:
        subject = self.subjects.get_by_id(subject_id, student_id)
        return mappers.subject_to_dto(subject) if subject is not None else None

    def subject_exists(self, subject_id: str, student_id: str) -> bool:
        return self.subjects.exists(subject_id, student_id)

    def create_subject(self, student_id: str, data: schemas.SubjectCreate) -> schemas.SubjectOut:
        if self.subjects.name_exists(data.name, student_id):
            logger.warning("Duplicate subject name for student %s", student_id)
            raise ValidationError(f"A subject with the name '{data.name}' already exists.")

        subject = self.subjects.create(mappers.subject_from_create(student_id, data))
        logger.info("Created subject %s for student %s", subject.id, student_id)
        return mappers.subject_to_dto(subject)

    def update_subject(
        self, student_id: str, subject_id: str, data: schemas.SubjectUpdate
    ) -> schemas.SubjectOut:
        subject = self.subjects.get_by_id(subject_id, student_id)
        if subject is None:
            raise ValidationError("Subject not found or access denied.")

        if self.subjects.name_exists(data.name, student_id, exclude_id=subject_id):
            raise ValidationError(f"A subject with the name '{data.name}' already exists.")

        subject.name = data.name
        subject.description = data.description
        subject = self.subjects.update(subject)
        logger.info("Updated subject %s", subject_id)
        return mappers.subject_to_dto(subject)

    def delete_subject(self, subject_id: str, student_id: str) -> bool:
        """
        False when the subject does not exist for this student.
        Raises SubjectInUseError while any task still references it.
        """
        subject = self.subjects.get_by_id(subject_id, student_id)
        if subject is None:
            return False

        if subject.tasks:
            logger.warning("Refused to delete subject %s: %d tasks attached", subject_id, len(subject.tasks))
            raise SubjectInUseError(
                "Cannot delete subject that has associated tasks. "
                "Please delete or reassign the tasks first."
            )

        deleted = self.subjects.delete(subject_id, student_id)
        if deleted:
            logger.info("Deleted subject %s", subject_id)
        return deleted
