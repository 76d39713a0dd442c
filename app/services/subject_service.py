# /app/services/subject_service.py

"""Business logic for subjects: validated create/rename and guarded delete."""

import logging
from collections import defaultdict
from typing import List, Optional

from app.core.errors import NotFoundError, Outcome
from app.models.subject_model import CreateSubjectRequest, Subject, SubjectSummary, UpdateSubjectRequest
from app.models.user_model import ActorContext
from .database_service import DatabaseService
from .validation_service import validate_subject_name

logger = logging.getLogger(__name__)


def create_subject(request: CreateSubjectRequest, db: DatabaseService, actor: ActorContext) -> Outcome[int]:
    error = validate_subject_name(request.name, db.existence)
    if error:
        return Outcome.failure(error)

    outcome = db.run_in_transaction(
        lambda: db.add_subject(request.name.strip()).subject_id, description="create subject"
    )
    if outcome:
        logger.info("Admin %s created subject %s", actor.user_id, outcome.value)
    return outcome


def update_subject(subject_id: int, request: UpdateSubjectRequest, db: DatabaseService, actor: ActorContext) -> Outcome[int]:
    if db.get_subject_by_id(subject_id) is None:
        return Outcome.failure(NotFoundError("Subject", subject_id))
    update_data = request.model_dump(exclude_unset=True)
    if "name" in update_data:
        error = validate_subject_name(update_data["name"], db.existence, exclude_subject_id=subject_id)
        if error:
            return Outcome.failure(error)
        update_data["name"] = update_data["name"].strip()

    outcome = db.run_in_transaction(
        lambda: db.update_subject(subject_id, update_data).subject_id, description="update subject"
    )
    if outcome:
        logger.info("Admin %s updated subject %s", actor.user_id, subject_id)
    return outcome


def delete_subject(subject_id: int, db: DatabaseService, actor: ActorContext) -> Outcome[bool]:
    def _delete() -> bool:
        db.delete_subject(subject_id)
        return True

    outcome = db.run_in_transaction(_delete, description="delete subject")
    if outcome:
        logger.info("Admin %s deleted subject %s", actor.user_id, subject_id)
    return outcome


def get_subject(subject_id: int, db: DatabaseService) -> Optional[Subject]:
    subject = db.get_subject_by_id(subject_id)
    if subject is None:
        return None
    return Subject(subject_id=subject.subject_id, name=subject.name)


def list_subjects_with_classes(db: DatabaseService) -> List[SubjectSummary]:
    """Every subject with the titles of the classes it is assigned to."""
    classes_by_subject = defaultdict(list)
    for subject_id, title in db.get_subject_class_titles():
        classes_by_subject[subject_id].append(title)

    return [
        SubjectSummary(
            subject_id=s.subject_id,
            name=s.name,
            classes=classes_by_subject[s.subject_id],
            class_count=len(classes_by_subject[s.subject_id]),
        )
        for s in db.get_all_subjects()
    ]
