# /app/services/database_helpers/subject_repository_sql.py

from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.errors import DependencyError, NotFoundError
from app.db.models.school_models import Subject, Class, ClassSubject


class SubjectRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def get_subject_by_id(self, subject_id: int) -> Optional[Subject]:
        return self.db.query(Subject).filter(Subject.subject_id == subject_id).first()

    def get_all_subjects(self) -> List[Subject]:
        return self.db.query(Subject).order_by(Subject.name).all()

    def get_subject_class_titles(self) -> List:
        """(subject_id, class title) pairs for every class a subject is taught in."""
        return (
            self.db.query(ClassSubject.subject_id, Class.title)
            .join(Class, ClassSubject.class_id == Class.class_id)
            .order_by(Class.title)
            .all()
        )

    def add_subject(self, name: str) -> Subject:
        new_subject = Subject(name=name)
        self.db.add(new_subject)
        self.db.flush()
        return new_subject

    def update_subject(self, subject_id: int, data: Dict) -> Subject:
        subject = self.get_subject_by_id(subject_id)
        if subject is None:
            raise NotFoundError("Subject", subject_id)
        for key, value in data.items():
            setattr(subject, key, value)
        self.db.flush()
        return subject

    def delete_subject(self, subject_id: int) -> None:
        """
        Deletes a subject that no class-subject assignment uses. Grade items
        belong to assignments, so blocking on assignments covers them too.
        """
        subject = (
            self.db.query(Subject).filter(Subject.subject_id == subject_id).with_for_update().first()
        )
        if subject is None:
            raise NotFoundError("Subject", subject_id)

        assignment_count = self.db.query(func.count(ClassSubject.class_subject_id)).filter(
            ClassSubject.subject_id == subject_id
        ).scalar()
        if assignment_count > 0:
            raise DependencyError(
                f"Subject '{subject.name}' cannot be deleted: it is assigned to {assignment_count} class(es).",
                "class_subjects",
            )

        self.db.delete(subject)
        self.db.flush()
