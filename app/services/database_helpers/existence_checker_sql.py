# /app/services/database_helpers/existence_checker_sql.py

"""SQL-backed implementation of the `ExistenceChecker` used by the validators."""

from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db.models.user_models import User, Student, Teacher
from app.db.models.school_models import Class, Subject


class SQLExistenceChecker:
    def __init__(self, db_session: Session):
        self.db = db_session

    def username_exists(self, username: str, exclude_user_id: Optional[int] = None) -> bool:
        query = self.db.query(User.user_id).filter(User.username == username)
        if exclude_user_id is not None:
            query = query.filter(User.user_id != exclude_user_id)
        return query.first() is not None

    def class_code_exists(self, class_code: str, exclude_class_id: Optional[int] = None) -> bool:
        query = self.db.query(Class.class_id).filter(Class.class_code == class_code)
        if exclude_class_id is not None:
            query = query.filter(Class.class_id != exclude_class_id)
        return query.first() is not None

    def class_exists(self, class_id: int) -> bool:
        return self.db.query(Class.class_id).filter(Class.class_id == class_id).first() is not None

    def subject_name_exists(self, name: str, exclude_subject_id: Optional[int] = None) -> bool:
        query = self.db.query(Subject.subject_id).filter(func.lower(Subject.name) == name.lower())
        if exclude_subject_id is not None:
            query = query.filter(Subject.subject_id != exclude_subject_id)
        return query.first() is not None

    def all_subjects_exist(self, subject_ids: Iterable[int]) -> bool:
        wanted = set(subject_ids)
        if not wanted:
            return True
        found = self.db.query(func.count(Subject.subject_id)).filter(Subject.subject_id.in_(wanted)).scalar()
        return found == len(wanted)

    def all_students_exist(self, student_ids: Iterable[int]) -> bool:
        wanted = set(student_ids)
        if not wanted:
            return True
        found = self.db.query(func.count(Student.student_id)).filter(Student.student_id.in_(wanted)).scalar()
        return found == len(wanted)

    def teacher_exists(self, teacher_id: int) -> bool:
        return self.db.query(Teacher.teacher_id).filter(Teacher.teacher_id == teacher_id).first() is not None
