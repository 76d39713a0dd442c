# /app/services/assignment_service.py

"""
Business logic for class-subject assignments: which teacher teaches which
subject to which class. A (class, subject) pair can be assigned only once.
"""

import logging
from typing import List, Optional

from app.core.errors import Outcome, ValidationError
from app.models.assignment_model import AssignmentDetails, CreateAssignmentRequest, UpdateAssignmentRequest
from app.models.user_model import ActorContext
from .database_service import DatabaseService

logger = logging.getLogger(__name__)


def _check_references(db: DatabaseService, class_id: Optional[int] = None,
                      subject_id: Optional[int] = None, teacher_id: Optional[int] = None):
    if class_id is not None and not db.existence.class_exists(class_id):
        return ValidationError(f"Class with ID {class_id} does not exist.")
    if subject_id is not None and not db.existence.all_subjects_exist([subject_id]):
        return ValidationError(f"Subject with ID {subject_id} does not exist.")
    if teacher_id is not None and not db.existence.teacher_exists(teacher_id):
        return ValidationError(f"Teacher with ID {teacher_id} does not exist.")
    return None


def _normalize_schedule(record: dict) -> None:
    if record.get("schedule") is not None:
        record["schedule"] = record["schedule"].strip() or None


def create_assignment(request: CreateAssignmentRequest, db: DatabaseService, actor: ActorContext) -> Outcome[int]:
    error = _check_references(db, request.class_id, request.subject_id, request.teacher_id)
    if error:
        return Outcome.failure(error)

    record = request.model_dump()
    _normalize_schedule(record)

    outcome = db.run_in_transaction(
        lambda: db.add_assignment(record).class_subject_id, description="create assignment"
    )
    if outcome:
        logger.info(
            "Admin %s assigned subject %s to class %s (teacher %s)",
            actor.user_id, request.subject_id, request.class_id, request.teacher_id,
        )
    return outcome


def update_assignment(class_subject_id: int, request: UpdateAssignmentRequest,
                      db: DatabaseService, actor: ActorContext) -> Outcome[int]:
    update_data = request.model_dump(exclude_unset=True)
    if update_data.get("teacher_id") is None:
        update_data.pop("teacher_id", None)
    if not update_data:
        return Outcome.failure(ValidationError("No update data provided."))
    _normalize_schedule(update_data)

    error = _check_references(db, teacher_id=update_data.get("teacher_id"))
    if error:
        return Outcome.failure(error)

    outcome = db.run_in_transaction(
        lambda: db.update_assignment(class_subject_id, update_data).class_subject_id,
        description="update assignment",
    )
    if outcome:
        logger.info("Admin %s updated assignment %s", actor.user_id, class_subject_id)
    return outcome


def delete_assignment(class_subject_id: int, db: DatabaseService, actor: ActorContext) -> Outcome[bool]:
    def _delete() -> bool:
        db.delete_assignment(class_subject_id)
        return True

    outcome = db.run_in_transaction(_delete, description="delete assignment")
    if outcome:
        logger.info("Admin %s removed assignment %s", actor.user_id, class_subject_id)
    return outcome


def get_assignment(class_subject_id: int, db: DatabaseService) -> Optional[AssignmentDetails]:
    row = db.get_assignment_details(class_subject_id)
    if row is None:
        return None
    return AssignmentDetails.model_validate(dict(row._mapping))


def list_assignments(db: DatabaseService, class_id: Optional[int] = None,
                     teacher_id: Optional[int] = None) -> List[AssignmentDetails]:
    return [
        AssignmentDetails.model_validate(dict(row._mapping))
        for row in db.get_all_assignment_details(class_id=class_id, teacher_id=teacher_id)
    ]
