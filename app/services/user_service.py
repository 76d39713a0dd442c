# /app/services/user_service.py

"""
This service module is the business logic layer for user administration:
creating accounts with their role sub-records, partial updates, password
resets, and guarded deletes.

Every public function receives the acting admin as an explicit `ActorContext`
and returns an `Outcome`. Multi-table writes run inside a single
`run_in_transaction` call, so a failure at any step leaves no partial rows.
"""

import logging
from typing import List, Optional

from app.core import security
from app.core.config import get_settings
from app.core.errors import NotFoundError, Outcome
from app.models.user_model import (
    ActorContext, CreateUserRequest, LinkedParent, LinkedStudent, Role, StudentOption,
    StudentProfile, TeacherAssignmentRef, TeacherClassRef, TeacherOption, UpdateUserRequest,
    UserDetails, UserListItem, get_role_name,
)
from .database_service import DatabaseService
from .validation_service import check_password_policy, parse_iso_date, validate_user_payload

logger = logging.getLogger(__name__)


# --- Write Operations ---

def create_user(request: CreateUserRequest, db: DatabaseService, actor: ActorContext) -> Outcome[int]:
    """
    Creates a user and the role sub-record its role requires (plus parent-student
    links for parents). Returns the new user id.
    """
    policy = get_settings().password_policy
    error = validate_user_payload(request, is_update=False, checker=db.existence, policy=policy)
    if error:
        logger.info("User creation by admin %s rejected: %s", actor.user_id, error.message)
        return Outcome.failure(error)

    role = Role(request.role_id)
    pass_hash = security.get_password_hash(request.password)

    def _create() -> int:
        user = db.add_user(request.username.strip(), pass_hash, role)
        if role == Role.STUDENT:
            db.add_student(
                user.user_id,
                request.first_name.strip(),
                request.last_name.strip(),
                parse_iso_date(request.dob),
                request.class_code.strip(),
            )
        elif role == Role.TEACHER:
            db.add_teacher(user.user_id)
        elif role == Role.PARENT:
            parent = db.add_parent(user.user_id)
            if request.student_ids:
                db.replace_parent_links(parent.parent_id, request.student_ids)
        return user.user_id

    outcome = db.run_in_transaction(_create, description="create user")
    if outcome:
        logger.info("Admin %s created user %s (%s)", actor.user_id, outcome.value, get_role_name(role))
    return outcome


def update_user(user_id: int, request: UpdateUserRequest, db: DatabaseService, actor: ActorContext) -> Outcome[int]:
    """
    Applies the supplied fields to the user and, depending on the stored role,
    to its sub-record. For parents, `student_ids` replaces every existing link.
    """
    user = db.get_user_by_id(user_id)
    if user is None:
        return Outcome.failure(NotFoundError("User", user_id))
    stored_role = Role(user.role_id)

    policy = get_settings().password_policy
    error = validate_user_payload(
        request, is_update=True, checker=db.existence, policy=policy,
        exclude_user_id=user_id, stored_role=stored_role,
    )
    if error:
        return Outcome.failure(error)

    fields = request.model_dump(exclude_unset=True)

    def _update() -> int:
        locked_user = db.get_user_for_update(user_id)
        if locked_user is None:
            raise NotFoundError("User", user_id)
        if "username" in fields:
            db.update_user(locked_user, {"username": fields["username"].strip()})

        if stored_role == Role.STUDENT:
            student = db.get_student_by_user_id(user_id)
            student_data = {}
            for name in ("first_name", "last_name", "class_code"):
                if name in fields:
                    student_data[name] = fields[name].strip()
            if "dob" in fields:
                student_data["dob"] = parse_iso_date(fields["dob"])
            if student is not None and student_data:
                db.update_student(student, student_data)
        elif stored_role == Role.PARENT and fields.get("student_ids") is not None:
            parent = db.get_parent_by_user_id(user_id)
            if parent is not None:
                db.replace_parent_links(parent.parent_id, fields["student_ids"])
        return user_id

    outcome = db.run_in_transaction(_update, description="update user")
    if outcome:
        logger.info("Admin %s updated user %s", actor.user_id, user_id)
    return outcome


def reset_password(user_id: int, new_password: str, db: DatabaseService, actor: ActorContext) -> Outcome[bool]:
    """Re-hashes and stores a new password. Fails with NotFoundError for an unknown user."""
    error = check_password_policy(new_password, get_settings().password_policy)
    if error:
        return Outcome.failure(error)

    pass_hash = security.get_password_hash(new_password)

    def _reset() -> bool:
        if db.update_password(user_id, pass_hash) == 0:
            raise NotFoundError("User", user_id)
        return True

    outcome = db.run_in_transaction(_reset, description="reset password")
    if outcome:
        logger.info("Admin %s reset the password of user %s", actor.user_id, user_id)
    return outcome


def delete_user(user_id: int, db: DatabaseService, actor: ActorContext) -> Outcome[bool]:
    """
    Deletes a user after its dependency checks pass. Students also lose their
    enrollments and parent links; parents lose their student links.
    """
    def _delete() -> bool:
        db.delete_user(user_id, acting_user_id=actor.user_id)
        return True

    outcome = db.run_in_transaction(_delete, description="delete user")
    if outcome:
        logger.info("Admin %s deleted user %s", actor.user_id, user_id)
    return outcome


# --- Read Operations ---

def list_users(db: DatabaseService, role_id: Optional[int] = None) -> List[UserListItem]:
    return [UserListItem.model_validate(row) for row in db.get_all_users(role_id)]


def get_user_details(user_id: int, db: DatabaseService) -> Optional[UserDetails]:
    """Assembles a user with everything its role links to, or None for an unknown id."""
    user = db.get_user_by_id(user_id)
    if user is None:
        return None

    details = UserDetails(
        user_id=user.user_id,
        username=user.username,
        role_id=user.role_id,
        role_name=get_role_name(user.role_id),
        created_at=user.created_at,
    )

    if user.role_id == Role.STUDENT:
        student = db.get_student_by_user_id(user_id)
        if student is not None:
            details.student = StudentProfile.model_validate(student)
            details.parents = [
                LinkedParent(parent_id=row.parent_id, username=row.username)
                for row in db.get_parents_of_student(student.student_id)
            ]
    elif user.role_id == Role.TEACHER:
        teacher = db.get_teacher_by_user_id(user_id)
        if teacher is not None:
            details.teacher_id = teacher.teacher_id
            details.homeroom_classes = [
                TeacherClassRef(class_id=c.class_id, class_code=c.class_code, title=c.title)
                for c in db.get_homeroom_classes(teacher.teacher_id)
            ]
            details.assignments = [
                TeacherAssignmentRef(
                    class_subject_id=row.class_subject_id,
                    class_title=row.class_title,
                    subject_name=row.subject_name,
                )
                for row in db.get_all_assignment_details(teacher_id=teacher.teacher_id)
            ]
    elif user.role_id == Role.PARENT:
        parent = db.get_parent_by_user_id(user_id)
        if parent is not None:
            details.parent_id = parent.parent_id
            details.children = [
                LinkedStudent(
                    student_id=s.student_id, first_name=s.first_name,
                    last_name=s.last_name, class_code=s.class_code,
                )
                for s in db.get_children_of_parent(parent.parent_id)
            ]
    return details


def list_teachers(db: DatabaseService) -> List[TeacherOption]:
    return [
        TeacherOption(teacher_id=row.teacher_id, user_id=row.user_id, username=row.username)
        for row in db.get_all_teachers()
    ]


def list_students(db: DatabaseService, search: Optional[str] = None) -> List[StudentOption]:
    return [
        StudentOption(
            student_id=s.student_id, user_id=s.user_id, first_name=s.first_name,
            last_name=s.last_name, class_code=s.class_code,
        )
        for s in db.get_all_students(search)
    ]
