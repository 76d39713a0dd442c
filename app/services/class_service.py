# /app/services/class_service.py

"""
This service module is the business logic layer for homeroom classes: class
CRUD with guarded delete, homeroom teacher assignment, and student enrollment.

Like the other services it acts as a facade over the `DatabaseService`,
validating input first and then running each write as one transaction.
"""

import logging
from typing import List, Optional

from app.core.errors import NotFoundError, Outcome, ValidationError
from app.models.class_model import Class, ClassSummary, CreateClassRequest, UpdateClassRequest
from app.models.user_model import ActorContext, StudentOption
from .database_service import DatabaseService
from .validation_service import validate_class_payload

logger = logging.getLogger(__name__)


def _clean(record: dict) -> dict:
    return {k: v.strip() if isinstance(v, str) else v for k, v in record.items()}


# --- Facade Methods for CRUD Operations ---

def create_class(class_data: CreateClassRequest, db: DatabaseService, actor: ActorContext) -> Outcome[int]:
    error = validate_class_payload(class_data, is_update=False, checker=db.existence)
    if error:
        return Outcome.failure(error)

    class_record = _clean(class_data.model_dump())
    outcome = db.run_in_transaction(lambda: db.add_class(class_record).class_id, description="create class")
    if outcome:
        logger.info("Admin %s created class %s (%s)", actor.user_id, outcome.value, class_record["class_code"])
    return outcome


def update_class(class_id: int, class_update: UpdateClassRequest, db: DatabaseService, actor: ActorContext) -> Outcome[int]:
    if db.get_class_by_id(class_id) is None:
        return Outcome.failure(NotFoundError("Class", class_id))

    update_data = _clean(class_update.model_dump(exclude_unset=True))
    if not update_data:
        return Outcome.failure(ValidationError("No update data provided."))
    error = validate_class_payload(class_update, is_update=True, checker=db.existence, exclude_class_id=class_id)
    if error:
        return Outcome.failure(error)

    outcome = db.run_in_transaction(lambda: db.update_class(class_id, update_data).class_id, description="update class")
    if outcome:
        logger.info("Admin %s updated class %s", actor.user_id, class_id)
    return outcome


def delete_class(class_id: int, db: DatabaseService, actor: ActorContext) -> Outcome[bool]:
    """Deletes a class that has no enrolled students and no subject assignments."""
    def _delete() -> bool:
        db.delete_class(class_id)
        return True

    outcome = db.run_in_transaction(_delete, description="delete class")
    if outcome:
        logger.info("Admin %s deleted class %s", actor.user_id, class_id)
    return outcome


def assign_homeroom_teacher(class_id: int, teacher_id: int, db: DatabaseService, actor: ActorContext) -> Outcome[int]:
    if not db.existence.teacher_exists(teacher_id):
        return Outcome.failure(ValidationError(f"Teacher with ID {teacher_id} does not exist."))

    outcome = db.run_in_transaction(
        lambda: db.update_class(class_id, {"homeroom_teacher_id": teacher_id}).class_id,
        description="assign homeroom teacher",
    )
    if outcome:
        logger.info("Admin %s made teacher %s homeroom teacher of class %s", actor.user_id, teacher_id, class_id)
    return outcome


# --- Enrollment ---

def enroll_student(class_id: int, student_id: int, db: DatabaseService, actor: ActorContext) -> Outcome[int]:
    if not db.existence.class_exists(class_id):
        return Outcome.failure(NotFoundError("Class", class_id))
    if not db.existence.all_students_exist([student_id]):
        return Outcome.failure(ValidationError(f"Student with ID {student_id} does not exist."))

    outcome = db.run_in_transaction(
        lambda: db.add_enrollment(student_id, class_id).enroll_id, description="enroll student"
    )
    if outcome:
        logger.info("Admin %s enrolled student %s in class %s", actor.user_id, student_id, class_id)
    return outcome


def remove_enrollment(enroll_id: int, db: DatabaseService, actor: ActorContext) -> Outcome[bool]:
    def _remove() -> bool:
        db.delete_enrollment(enroll_id)
        return True

    outcome = db.run_in_transaction(_remove, description="remove enrollment")
    if outcome:
        logger.info("Admin %s removed enrollment %s", actor.user_id, enroll_id)
    return outcome


# --- Data Assembly ---

def get_all_classes_with_summary(db: DatabaseService) -> List[ClassSummary]:
    """Every class with its homeroom teacher's name and subject/student counts."""
    return [ClassSummary.model_validate(dict(row._mapping)) for row in db.get_class_summaries()]


def get_class(class_id: int, db: DatabaseService) -> Optional[Class]:
    db_class = db.get_class_by_id(class_id)
    if db_class is None:
        return None
    return Class(
        class_id=db_class.class_id,
        class_code=db_class.class_code,
        title=db_class.title,
        homeroom_teacher_id=db_class.homeroom_teacher_id,
    )


def get_class_students(class_id: int, db: DatabaseService) -> List[StudentOption]:
    return [
        StudentOption(
            student_id=s.student_id, user_id=s.user_id, first_name=s.first_name,
            last_name=s.last_name, class_code=s.class_code,
        )
        for s in db.get_class_students(class_id)
    ]
