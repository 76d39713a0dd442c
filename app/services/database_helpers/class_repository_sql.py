# /app/services/database_helpers/class_repository_sql.py

"""
This module contains the SQLAlchemy queries for homeroom classes and their
enrollments. Like every repository, it flushes but never commits; the guarded
deletes raise `DependencyError` for the coordinator to roll back.
"""

from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.errors import DependencyError, NotFoundError, UniquenessError
from app.db.models.user_models import User, Teacher, Student
from app.db.models.school_models import Class, ClassSubject, Enrollment, Grade, Attendance


class ClassRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Class Methods ---

    def get_class_by_id(self, class_id: int) -> Optional[Class]:
        return self.db.query(Class).filter(Class.class_id == class_id).first()

    def get_all_classes(self) -> List[Class]:
        return self.db.query(Class).order_by(Class.class_code).all()

    def get_class_summaries(self) -> List:
        """Classes with the homeroom teacher's username and subject/student counts."""
        subject_counts = (
            self.db.query(ClassSubject.class_id, func.count(ClassSubject.class_subject_id).label("subject_count"))
            .group_by(ClassSubject.class_id)
            .subquery()
        )
        student_counts = (
            self.db.query(Enrollment.class_id, func.count(Enrollment.enroll_id).label("student_count"))
            .group_by(Enrollment.class_id)
            .subquery()
        )
        return (
            self.db.query(
                Class.class_id,
                Class.class_code,
                Class.title,
                Class.homeroom_teacher_id,
                User.username.label("homeroom_teacher_name"),
                func.coalesce(subject_counts.c.subject_count, 0).label("subject_count"),
                func.coalesce(student_counts.c.student_count, 0).label("student_count"),
            )
            .outerjoin(Teacher, Class.homeroom_teacher_id == Teacher.teacher_id)
            .outerjoin(User, Teacher.user_id == User.user_id)
            .outerjoin(subject_counts, subject_counts.c.class_id == Class.class_id)
            .outerjoin(student_counts, student_counts.c.class_id == Class.class_id)
            .order_by(Class.class_code)
            .all()
        )

    def get_homeroom_classes(self, teacher_id: int) -> List[Class]:
        return self.db.query(Class).filter(Class.homeroom_teacher_id == teacher_id).order_by(Class.class_code).all()

    def add_class(self, record: Dict) -> Class:
        new_class = Class(**record)
        self.db.add(new_class)
        self.db.flush()
        return new_class

    def update_class(self, class_id: int, data: Dict) -> Class:
        """Applies `data`; a new `class_code` is carried over to the students that referenced the old one."""
        db_class = self.db.query(Class).filter(Class.class_id == class_id).with_for_update().first()
        if db_class is None:
            raise NotFoundError("Class", class_id)
        old_code = db_class.class_code
        for key, value in data.items():
            setattr(db_class, key, value)
        self.db.flush()
        if db_class.class_code != old_code:
            self.db.query(Student).filter(Student.class_code == old_code).update(
                {Student.class_code: db_class.class_code}, synchronize_session=False
            )
        return db_class

    def delete_class(self, class_id: int) -> None:
        """Deletes a class that has neither enrollments nor subject assignments."""
        db_class = self.db.query(Class).filter(Class.class_id == class_id).with_for_update().first()
        if db_class is None:
            raise NotFoundError("Class", class_id)

        enrollment_count = self.db.query(func.count(Enrollment.enroll_id)).filter(
            Enrollment.class_id == class_id
        ).scalar()
        if enrollment_count > 0:
            raise DependencyError(
                f"Class '{db_class.class_code}' cannot be deleted: it has {enrollment_count} enrolled student(s).",
                "enrollments",
            )

        assignment_count = self.db.query(func.count(ClassSubject.class_subject_id)).filter(
            ClassSubject.class_id == class_id
        ).scalar()
        if assignment_count > 0:
            raise DependencyError(
                f"Class '{db_class.class_code}' cannot be deleted: it has {assignment_count} assigned subject(s).",
                "class_subjects",
            )

        self.db.delete(db_class)
        self.db.flush()

    # --- Enrollment Methods ---

    def get_enrollment(self, student_id: int, class_id: int) -> Optional[Enrollment]:
        return self.db.query(Enrollment).filter(
            Enrollment.student_id == student_id, Enrollment.class_id == class_id
        ).first()

    def get_class_students(self, class_id: int) -> List[Student]:
        return (
            self.db.query(Student)
            .join(Enrollment, Enrollment.student_id == Student.student_id)
            .filter(Enrollment.class_id == class_id)
            .order_by(Student.last_name, Student.first_name)
            .all()
        )

    def add_enrollment(self, student_id: int, class_id: int) -> Enrollment:
        if self.get_enrollment(student_id, class_id) is not None:
            raise UniquenessError("The student is already enrolled in this class.")
        enrollment = Enrollment(student_id=student_id, class_id=class_id)
        self.db.add(enrollment)
        self.db.flush()
        return enrollment

    def delete_enrollment(self, enroll_id: int) -> None:
        """Removes a student from a class unless grades or attendance were recorded for it."""
        enrollment = (
            self.db.query(Enrollment).filter(Enrollment.enroll_id == enroll_id).with_for_update().first()
        )
        if enrollment is None:
            raise NotFoundError("Enrollment", enroll_id)

        grade_count = self.db.query(func.count(Grade.grade_id)).filter(Grade.enroll_id == enroll_id).scalar()
        if grade_count > 0:
            raise DependencyError("The enrollment cannot be removed: it has recorded grades.", "grades")

        attendance_count = self.db.query(func.count(Attendance.att_id)).filter(
            Attendance.enroll_id == enroll_id
        ).scalar()
        if attendance_count > 0:
            raise DependencyError("The enrollment cannot be removed: it has attendance records.", "attendance")

        self.db.delete(enrollment)
        self.db.flush()
