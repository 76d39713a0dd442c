# /app/services/database_service.py

from datetime import date
from typing import Callable, Dict, Generator, List, Optional, TypeVar

from sqlalchemy.orm import Session
from fastapi import Depends

# --- Core Database Setup ---
from app.db.database import get_db
from app.core.errors import Outcome

# --- Repository Imports ---
from .database_helpers.user_repository_sql import UserRepositorySQL
from .database_helpers.subject_repository_sql import SubjectRepositorySQL
from .database_helpers.class_repository_sql import ClassRepositorySQL
from .database_helpers.assignment_repository_sql import AssignmentRepositorySQL
from .database_helpers.settings_repository_sql import SettingsRepositorySQL
from .database_helpers.reporting_repository_sql import ReportingRepositorySQL
from .database_helpers.existence_checker_sql import SQLExistenceChecker
from .database_helpers.transaction import run_in_transaction

T = TypeVar("T")


class DatabaseService:
    def __init__(self, db_session: Session):
        """
        Bundles every SQL repository around one session, so all the statements
        of a single request share one connection and one transaction.
        """
        self.session = db_session
        self.user_repo = UserRepositorySQL(db_session)
        self.subject_repo = SubjectRepositorySQL(db_session)
        self.class_repo = ClassRepositorySQL(db_session)
        self.assignment_repo = AssignmentRepositorySQL(db_session)
        self.settings_repo = SettingsRepositorySQL(db_session)
        self.reporting_repo = ReportingRepositorySQL(db_session)
        self.existence = SQLExistenceChecker(db_session)

    # --- TRANSACTION COORDINATION ---
    def run_in_transaction(self, fn: Callable[[], T], description: str = "write") -> Outcome[T]:
        return run_in_transaction(self.session, fn, description)

    # --- USER METHODS (DELEGATED) ---
    def get_user_by_id(self, user_id: int): return self.user_repo.get_user_by_id(user_id)
    def get_user_for_update(self, user_id: int): return self.user_repo.get_user_for_update(user_id)
    def get_student_by_user_id(self, user_id: int): return self.user_repo.get_student_by_user_id(user_id)
    def get_teacher_by_user_id(self, user_id: int): return self.user_repo.get_teacher_by_user_id(user_id)
    def get_parent_by_user_id(self, user_id: int): return self.user_repo.get_parent_by_user_id(user_id)
    def get_parent_student_ids(self, parent_id: int) -> List[int]: return self.user_repo.get_parent_student_ids(parent_id)
    def add_user(self, username: str, pass_hash: str, role_id: int): return self.user_repo.add_user(username, pass_hash, role_id)
    def add_student(self, user_id: int, first_name: str, last_name: str, dob: date, class_code: str):
        return self.user_repo.add_student(user_id, first_name, last_name, dob, class_code)
    def add_teacher(self, user_id: int): return self.user_repo.add_teacher(user_id)
    def add_parent(self, user_id: int): return self.user_repo.add_parent(user_id)
    def replace_parent_links(self, parent_id: int, student_ids: List[int]): return self.user_repo.replace_parent_links(parent_id, student_ids)
    def update_user(self, user, data: Dict): return self.user_repo.update_user(user, data)
    def update_student(self, student, data: Dict): return self.user_repo.update_student(student, data)
    def update_password(self, user_id: int, pass_hash: str) -> int: return self.user_repo.update_password(user_id, pass_hash)
    def delete_user(self, user_id: int, acting_user_id: Optional[int] = None): return self.user_repo.delete_user(user_id, acting_user_id)
    def get_all_users(self, role_id: Optional[int] = None) -> List: return self.user_repo.get_all_users(role_id)
    def get_all_teachers(self) -> List: return self.user_repo.get_all_teachers()
    def get_all_students(self, search: Optional[str] = None) -> List: return self.user_repo.get_all_students(search)
    def get_parents_of_student(self, student_id: int) -> List: return self.user_repo.get_parents_of_student(student_id)
    def get_children_of_parent(self, parent_id: int) -> List: return self.user_repo.get_children_of_parent(parent_id)

    # --- SUBJECT METHODS (DELEGATED) ---
    def get_subject_by_id(self, subject_id: int): return self.subject_repo.get_subject_by_id(subject_id)
    def get_all_subjects(self) -> List: return self.subject_repo.get_all_subjects()
    def get_subject_class_titles(self) -> List: return self.subject_repo.get_subject_class_titles()
    def add_subject(self, name: str): return self.subject_repo.add_subject(name)
    def update_subject(self, subject_id: int, data: Dict): return self.subject_repo.update_subject(subject_id, data)
    def delete_subject(self, subject_id: int): return self.subject_repo.delete_subject(subject_id)

    # --- CLASS & ENROLLMENT METHODS (DELEGATED) ---
    def get_class_by_id(self, class_id: int): return self.class_repo.get_class_by_id(class_id)
    def get_all_classes(self) -> List: return self.class_repo.get_all_classes()
    def get_class_summaries(self) -> List: return self.class_repo.get_class_summaries()
    def get_homeroom_classes(self, teacher_id: int) -> List: return self.class_repo.get_homeroom_classes(teacher_id)
    def add_class(self, record: Dict): return self.class_repo.add_class(record)
    def update_class(self, class_id: int, data: Dict): return self.class_repo.update_class(class_id, data)
    def delete_class(self, class_id: int): return self.class_repo.delete_class(class_id)
    def get_class_students(self, class_id: int) -> List: return self.class_repo.get_class_students(class_id)
    def add_enrollment(self, student_id: int, class_id: int): return self.class_repo.add_enrollment(student_id, class_id)
    def delete_enrollment(self, enroll_id: int): return self.class_repo.delete_enrollment(enroll_id)

    # --- CLASS-SUBJECT ASSIGNMENT METHODS (DELEGATED) ---
    def get_assignment_by_id(self, class_subject_id: int): return self.assignment_repo.get_assignment_by_id(class_subject_id)
    def get_assignment_details(self, class_subject_id: int): return self.assignment_repo.get_assignment_details(class_subject_id)
    def get_all_assignment_details(self, class_id: Optional[int] = None, teacher_id: Optional[int] = None) -> List:
        return self.assignment_repo.get_all_assignment_details(class_id=class_id, teacher_id=teacher_id)
    def add_assignment(self, record: Dict): return self.assignment_repo.add_assignment(record)
    def update_assignment(self, class_subject_id: int, data: Dict): return self.assignment_repo.update_assignment(class_subject_id, data)
    def delete_assignment(self, class_subject_id: int): return self.assignment_repo.delete_assignment(class_subject_id)

    # --- SETTINGS METHODS (DELEGATED) ---
    def get_settings(self): return self.settings_repo.get_settings()
    def update_settings(self, data: Dict): return self.settings_repo.update_settings(data)

    # --- REPORTING METHODS (DELEGATED) ---
    def count_users_per_role(self) -> Dict[str, int]: return self.reporting_repo.count_users_per_role()
    def count_classes(self) -> int: return self.reporting_repo.count_classes()
    def count_subjects(self) -> int: return self.reporting_repo.count_subjects()
    def count_assignments(self) -> int: return self.assignment_repo.count_assignments()
    def get_attendance_between(self, since: date, until: date) -> List[Dict]: return self.reporting_repo.get_attendance_between(since, until)


def get_db_service(db: Session = Depends(get_db)) -> Generator[DatabaseService, None, None]:
    """FastAPI dependency that provides a DatabaseService bound to the request's session."""
    yield DatabaseService(db_session=db)
