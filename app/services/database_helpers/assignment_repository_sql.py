# /app/services/database_helpers/assignment_repository_sql.py

from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, aliased

from app.core.errors import DependencyError, NotFoundError, UniquenessError
from app.db.models.user_models import User, Teacher
from app.db.models.school_models import Class, Subject, ClassSubject, GradeItem, Period


class AssignmentRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def get_assignment_by_id(self, class_subject_id: int) -> Optional[ClassSubject]:
        return self.db.query(ClassSubject).filter(ClassSubject.class_subject_id == class_subject_id).first()

    def get_assignment_by_pair(self, class_id: int, subject_id: int) -> Optional[ClassSubject]:
        return self.db.query(ClassSubject).filter(
            ClassSubject.class_id == class_id, ClassSubject.subject_id == subject_id
        ).first()

    def _details_query(self):
        teacher_user = aliased(User)
        return (
            self.db.query(
                ClassSubject.class_subject_id,
                ClassSubject.class_id,
                Class.class_code,
                Class.title.label("class_title"),
                ClassSubject.subject_id,
                Subject.name.label("subject_name"),
                ClassSubject.teacher_id,
                teacher_user.username.label("teacher_name"),
                ClassSubject.schedule,
            )
            .join(Class, ClassSubject.class_id == Class.class_id)
            .join(Subject, ClassSubject.subject_id == Subject.subject_id)
            .join(Teacher, ClassSubject.teacher_id == Teacher.teacher_id)
            .join(teacher_user, Teacher.user_id == teacher_user.user_id)
        )

    def get_all_assignment_details(self, class_id: Optional[int] = None, teacher_id: Optional[int] = None) -> List:
        query = self._details_query()
        if class_id is not None:
            query = query.filter(ClassSubject.class_id == class_id)
        if teacher_id is not None:
            query = query.filter(ClassSubject.teacher_id == teacher_id)
        return query.order_by(Class.class_code, Subject.name).all()

    def get_assignment_details(self, class_subject_id: int):
        return self._details_query().filter(ClassSubject.class_subject_id == class_subject_id).first()

    def add_assignment(self, record: Dict) -> ClassSubject:
        if self.get_assignment_by_pair(record["class_id"], record["subject_id"]) is not None:
            raise UniquenessError("This subject is already assigned to this class.")
        assignment = ClassSubject(**record)
        self.db.add(assignment)
        self.db.flush()
        return assignment

    def update_assignment(self, class_subject_id: int, data: Dict) -> ClassSubject:
        assignment = self.get_assignment_by_id(class_subject_id)
        if assignment is None:
            raise NotFoundError("Class-subject assignment", class_subject_id)
        for key, value in data.items():
            setattr(assignment, key, value)
        self.db.flush()
        return assignment

    def delete_assignment(self, class_subject_id: int) -> None:
        """Removes an assignment that no grade item or period refers to."""
        assignment = (
            self.db.query(ClassSubject)
            .filter(ClassSubject.class_subject_id == class_subject_id)
            .with_for_update()
            .first()
        )
        if assignment is None:
            raise NotFoundError("Class-subject assignment", class_subject_id)

        grade_item_count = self.db.query(func.count(GradeItem.item_id)).filter(
            GradeItem.class_subject_id == class_subject_id
        ).scalar()
        if grade_item_count > 0:
            raise DependencyError("The assignment cannot be removed: it has grade items.", "grade_items")

        period_count = self.db.query(func.count(Period.period_id)).filter(
            Period.class_subject_id == class_subject_id
        ).scalar()
        if period_count > 0:
            raise DependencyError("The assignment cannot be removed: it has scheduled periods.", "periods")

        self.db.delete(assignment)
        self.db.flush()

    def count_assignments(self) -> int:
        return self.db.query(func.count(ClassSubject.class_subject_id)).scalar()
