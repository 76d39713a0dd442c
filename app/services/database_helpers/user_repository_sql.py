# /app/services/database_helpers/user_repository_sql.py

"""
This module contains all the SQLAlchemy queries for the `users` table and the
role sub-record tables (`students`, `teachers`, `parents`, `student_parent`).

Methods here never commit. They are meant to be composed inside
`run_in_transaction`, and the guarded delete raises `DependencyError` so the
coordinator can roll the whole unit of work back.
"""

from datetime import date
from typing import Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.core.errors import DependencyError, NotFoundError
from app.db.models.user_models import Role as RoleRecord, User, Student, Teacher, Parent, StudentParent
from app.db.models.school_models import Class, ClassSubject, Enrollment, Grade, Attendance
from app.models.user_model import Role


class UserRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Lookups ---

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.user_id == user_id).first()

    def get_user_for_update(self, user_id: int) -> Optional[User]:
        """Fetches a user and locks its row until the surrounding transaction ends."""
        return self.db.query(User).filter(User.user_id == user_id).with_for_update().first()

    def get_student_by_user_id(self, user_id: int) -> Optional[Student]:
        return self.db.query(Student).filter(Student.user_id == user_id).first()

    def get_teacher_by_user_id(self, user_id: int) -> Optional[Teacher]:
        return self.db.query(Teacher).filter(Teacher.user_id == user_id).first()

    def get_parent_by_user_id(self, user_id: int) -> Optional[Parent]:
        return self.db.query(Parent).filter(Parent.user_id == user_id).first()

    def get_parent_student_ids(self, parent_id: int) -> List[int]:
        rows = self.db.query(StudentParent.student_id).filter(StudentParent.parent_id == parent_id).all()
        return [row.student_id for row in rows]

    # --- Create ---

    def add_user(self, username: str, pass_hash: str, role_id: int) -> User:
        new_user = User(username=username, pass_hash=pass_hash, role_id=role_id)
        self.db.add(new_user)
        self.db.flush()
        return new_user

    def add_student(self, user_id: int, first_name: str, last_name: str, dob: date, class_code: str) -> Student:
        new_student = Student(
            user_id=user_id,
            first_name=first_name,
            last_name=last_name,
            dob=dob,
            class_code=class_code,
        )
        self.db.add(new_student)
        self.db.flush()
        return new_student

    def add_teacher(self, user_id: int) -> Teacher:
        new_teacher = Teacher(user_id=user_id)
        self.db.add(new_teacher)
        self.db.flush()
        return new_teacher

    def add_parent(self, user_id: int) -> Parent:
        new_parent = Parent(user_id=user_id)
        self.db.add(new_parent)
        self.db.flush()
        return new_parent

    def replace_parent_links(self, parent_id: int, student_ids: List[int]) -> None:
        """Deletes every link for the parent, then inserts one per distinct student id."""
        self.db.query(StudentParent).filter(StudentParent.parent_id == parent_id).delete(synchronize_session=False)
        for student_id in dict.fromkeys(student_ids):
            self.db.add(StudentParent(student_id=student_id, parent_id=parent_id))
        self.db.flush()

    # --- Update ---

    def update_user(self, user: User, data: Dict) -> User:
        for key, value in data.items():
            setattr(user, key, value)
        self.db.flush()
        return user

    def update_student(self, student: Student, data: Dict) -> Student:
        for key, value in data.items():
            setattr(student, key, value)
        self.db.flush()
        return student

    def update_password(self, user_id: int, pass_hash: str) -> int:
        """Returns the number of rows touched, which is 0 for an unknown user."""
        return (
            self.db.query(User)
            .filter(User.user_id == user_id)
            .update({User.pass_hash: pass_hash}, synchronize_session=False)
        )

    # --- Dependency Counts ---

    def count_teacher_assignments(self, teacher_id: int) -> int:
        return self.db.query(func.count(ClassSubject.class_subject_id)).filter(
            ClassSubject.teacher_id == teacher_id
        ).scalar()

    def count_homeroom_classes(self, teacher_id: int) -> int:
        return self.db.query(func.count(Class.class_id)).filter(
            Class.homeroom_teacher_id == teacher_id
        ).scalar()

    def count_student_grades(self, student_id: int) -> int:
        return (
            self.db.query(func.count(Grade.grade_id))
            .join(Enrollment, Grade.enroll_id == Enrollment.enroll_id)
            .filter(Enrollment.student_id == student_id)
            .scalar()
        )

    def count_student_attendance(self, student_id: int) -> int:
        return (
            self.db.query(func.count(Attendance.att_id))
            .join(Enrollment, Attendance.enroll_id == Enrollment.enroll_id)
            .filter(Enrollment.student_id == student_id)
            .scalar()
        )

    # --- Guarded Delete ---

    def delete_user(self, user_id: int, acting_user_id: Optional[int] = None) -> None:
        """
        Deletes a user together with its role sub-record.

        Raises `NotFoundError` for an unknown id and `DependencyError` when the
        user is still referenced. All checks run after the user row is locked,
        so no dependent row can slip in between the check and the delete.
        """
        user = self.get_user_for_update(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        if acting_user_id is not None and user.user_id == acting_user_id:
            raise DependencyError("You cannot delete the account you are signed in with.", "self")

        if user.role_id == Role.TEACHER:
            self._delete_teacher(user)
        elif user.role_id == Role.STUDENT:
            self._delete_student(user)
        elif user.role_id == Role.PARENT:
            self._delete_parent(user)

        self.db.delete(user)
        self.db.flush()

    def _delete_teacher(self, user: User) -> None:
        teacher = self.get_teacher_by_user_id(user.user_id)
        if teacher is None:
            return
        if self.count_teacher_assignments(teacher.teacher_id) > 0:
            raise DependencyError(
                f"Teacher '{user.username}' cannot be deleted: has assigned classes.",
                "class_subjects",
            )
        if self.count_homeroom_classes(teacher.teacher_id) > 0:
            raise DependencyError(
                f"Teacher '{user.username}' cannot be deleted: is a homeroom teacher.",
                "classes",
            )
        self.db.delete(teacher)

    def _delete_student(self, user: User) -> None:
        student = self.get_student_by_user_id(user.user_id)
        if student is None:
            return
        if self.count_student_grades(student.student_id) > 0:
            raise DependencyError(
                f"Student '{user.username}' cannot be deleted: has recorded grades.",
                "grades",
            )
        if self.count_student_attendance(student.student_id) > 0:
            raise DependencyError(
                f"Student '{user.username}' cannot be deleted: has attendance records.",
                "attendance",
            )
        self.db.query(StudentParent).filter(
            StudentParent.student_id == student.student_id
        ).delete(synchronize_session=False)
        self.db.query(Enrollment).filter(
            Enrollment.student_id == student.student_id
        ).delete(synchronize_session=False)
        self.db.delete(student)

    def _delete_parent(self, user: User) -> None:
        parent = self.get_parent_by_user_id(user.user_id)
        if parent is None:
            return
        self.db.query(StudentParent).filter(
            StudentParent.parent_id == parent.parent_id
        ).delete(synchronize_session=False)
        self.db.delete(parent)

    # --- Listings ---

    def get_all_users(self, role_id: Optional[int] = None) -> List:
        """Users with their role name and, for students, their name and class code."""
        query = (
            self.db.query(
                User.user_id,
                User.username,
                User.role_id,
                RoleRecord.name.label("role_name"),
                User.created_at,
                Student.first_name,
                Student.last_name,
                Student.class_code,
            )
            .join(RoleRecord, User.role_id == RoleRecord.role_id)
            .outerjoin(Student, Student.user_id == User.user_id)
        )
        if role_id is not None:
            query = query.filter(User.role_id == role_id)
        return query.order_by(User.username).all()

    def get_all_teachers(self) -> List:
        return (
            self.db.query(Teacher.teacher_id, Teacher.user_id, User.username)
            .join(User, Teacher.user_id == User.user_id)
            .order_by(User.username)
            .all()
        )

    def get_all_students(self, search: Optional[str] = None) -> List[Student]:
        query = self.db.query(Student)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(Student.first_name.ilike(pattern), Student.last_name.ilike(pattern)))
        return query.order_by(Student.last_name, Student.first_name).all()

    def get_parents_of_student(self, student_id: int) -> List:
        return (
            self.db.query(Parent.parent_id, User.username)
            .join(StudentParent, StudentParent.parent_id == Parent.parent_id)
            .join(User, Parent.user_id == User.user_id)
            .filter(StudentParent.student_id == student_id)
            .order_by(User.username)
            .all()
        )

    def get_children_of_parent(self, parent_id: int) -> List[Student]:
        return (
            self.db.query(Student)
            .join(StudentParent, StudentParent.student_id == Student.student_id)
            .filter(StudentParent.parent_id == parent_id)
            .order_by(Student.last_name, Student.first_name)
            .all()
        )
