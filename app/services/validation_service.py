# /app/services/validation_service.py

"""
Field-level and cross-field validation for the admin write operations.

Every validator is a pure function: it inspects a request model, asks an
`ExistenceChecker` read-only questions, and returns the first failure it finds
(or None). Nothing here touches the session directly.
"""

import re
from datetime import date
from typing import Iterable, Optional, Protocol, Union

from app.core.config import PasswordPolicy
from app.core.errors import (
    FormatError, PolicyError, RequiredFieldMissing, ServiceError, UniquenessError, ValidationError
)
from app.models.class_model import CreateClassRequest, UpdateClassRequest
from app.models.user_model import CreateUserRequest, Role, UpdateUserRequest

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]{3,50}$")

STUDENT_REQUIRED_FIELDS = ("first_name", "last_name", "dob", "class_code")


class ExistenceChecker(Protocol):
    def username_exists(self, username: str, exclude_user_id: Optional[int] = None) -> bool: ...
    def class_code_exists(self, class_code: str, exclude_class_id: Optional[int] = None) -> bool: ...
    def class_exists(self, class_id: int) -> bool: ...
    def subject_name_exists(self, name: str, exclude_subject_id: Optional[int] = None) -> bool: ...
    def all_subjects_exist(self, subject_ids: Iterable[int]) -> bool: ...
    def all_students_exist(self, student_ids: Iterable[int]) -> bool: ...
    def teacher_exists(self, teacher_id: int) -> bool: ...


# --- Helpers ---

def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_iso_date(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value.strip())
    except (ValueError, AttributeError):
        return None


def check_password_policy(password: str, policy: PasswordPolicy) -> Optional[PolicyError]:
    if len(password) < policy.min_length:
        return PolicyError(f"Password must be at least {policy.min_length} characters long.")
    if policy.require_complexity:
        if not re.search(r"[A-Za-z]", password) or not re.search(r"\d", password):
            return PolicyError("Password must contain at least one letter and one digit.")
    return None


def _check_username(username: str, checker: ExistenceChecker, exclude_user_id: Optional[int]) -> Optional[ServiceError]:
    if not USERNAME_PATTERN.match(username):
        return FormatError("Username must be 3-50 characters: letters, digits and underscores only.")
    if checker.username_exists(username, exclude_user_id):
        return UniquenessError(f"Username '{username}' is already taken.")
    return None


def _check_student_fields(fields: dict, checker: ExistenceChecker, require_all: bool) -> Optional[ServiceError]:
    for name in STUDENT_REQUIRED_FIELDS:
        if (require_all or name in fields) and _is_blank(fields.get(name)):
            return RequiredFieldMissing(name)
    if "dob" in fields and parse_iso_date(fields["dob"]) is None:
        return FormatError("Date of birth must be a valid date in YYYY-MM-DD format.")
    if "class_code" in fields and not checker.class_code_exists(fields["class_code"].strip()):
        return ValidationError(f"Class code '{fields['class_code'].strip()}' does not exist.")
    return None


def _check_role_fields(role: Role, fields: dict, checker: ExistenceChecker, is_update: bool) -> Optional[ServiceError]:
    if role == Role.STUDENT:
        return _check_student_fields(fields, checker, require_all=not is_update)
    if role == Role.TEACHER and fields.get("subject_ids"):
        if not checker.all_subjects_exist(fields["subject_ids"]):
            return ValidationError("One or more selected subjects do not exist.")
    if role == Role.PARENT and fields.get("student_ids"):
        if not checker.all_students_exist(fields["student_ids"]):
            return ValidationError("One or more selected students do not exist.")
    return None


# --- Public Validators ---

def validate_user_payload(
    payload: Union[CreateUserRequest, UpdateUserRequest],
    is_update: bool,
    checker: ExistenceChecker,
    policy: PasswordPolicy,
    exclude_user_id: Optional[int] = None,
    stored_role: Optional[Role] = None,
) -> Optional[ServiceError]:
    """
    Validates a create or update payload and returns the first failure found.

    On create, username, role and password are required and the role decides
    which profile fields are mandatory. On update only the supplied fields are
    checked, against `stored_role`; changing the role is rejected.
    """
    fields = payload.model_dump(exclude_unset=True)

    if is_update:
        role = stored_role
        if fields.get("role_id") is not None and fields["role_id"] != stored_role:
            return ValidationError("Changing a user's role is not supported.")
        if "username" in fields:
            if _is_blank(fields["username"]):
                return RequiredFieldMissing("username")
            error = _check_username(fields["username"].strip(), checker, exclude_user_id)
            if error:
                return error
    else:
        for name in ("username", "role_id", "password"):
            if _is_blank(fields.get(name)):
                return RequiredFieldMissing(name)
        try:
            role = Role(fields["role_id"])
        except ValueError:
            return ValidationError(f"Unknown role: {fields['role_id']}.")
        error = _check_username(fields["username"].strip(), checker, exclude_user_id)
        if error:
            return error
        error = check_password_policy(fields["password"], policy)
        if error:
            return error

    if role is None:
        return None
    return _check_role_fields(role, fields, checker, is_update)


def validate_class_payload(
    payload: Union[CreateClassRequest, UpdateClassRequest],
    is_update: bool,
    checker: ExistenceChecker,
    exclude_class_id: Optional[int] = None,
) -> Optional[ServiceError]:
    fields = payload.model_dump(exclude_unset=True)
    for name in ("class_code", "title"):
        if (not is_update or name in fields) and _is_blank(fields.get(name)):
            return RequiredFieldMissing(name)
    if "class_code" in fields and checker.class_code_exists(fields["class_code"].strip(), exclude_class_id):
        return UniquenessError(f"Class code '{fields['class_code'].strip()}' is already in use.")
    teacher_id = fields.get("homeroom_teacher_id")
    if teacher_id is not None and not checker.teacher_exists(teacher_id):
        return ValidationError(f"Teacher with ID {teacher_id} does not exist.")
    return None


def validate_subject_name(
    name: Optional[str],
    checker: ExistenceChecker,
    exclude_subject_id: Optional[int] = None,
) -> Optional[ServiceError]:
    if _is_blank(name):
        return RequiredFieldMissing("name")
    if len(name.strip()) > 100:
        return FormatError("Subject name must be at most 100 characters.")
    if checker.subject_name_exists(name.strip(), exclude_subject_id):
        return UniquenessError(f"Subject '{name.strip()}' already exists.")
    return None
