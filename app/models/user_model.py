# /app/models/user_model.py

"""
Pydantic contracts for user management.

Request models keep every field optional on purpose: the validation service,
not pydantic, decides which fields are required for a given role, so that a
missing field is reported as `RequiredFieldMissing` with the field name.
"""

from datetime import date, datetime
from enum import IntEnum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Core Enumerations ---
class Role(IntEnum):
    ADMIN = 1
    TEACHER = 2
    STUDENT = 3
    PARENT = 4


ROLE_NAMES = {
    Role.ADMIN: "Administrator",
    Role.TEACHER: "Teacher",
    Role.STUDENT: "Student",
    Role.PARENT: "Parent",
}


def get_role_name(role_id: int) -> str:
    try:
        return ROLE_NAMES[Role(role_id)]
    except ValueError:
        return "Unknown Role"


class ActorContext(BaseModel):
    """The authenticated caller on whose behalf a service operation runs."""
    model_config = ConfigDict(frozen=True)

    user_id: int
    role: Role


# --- Request Models ---

class CreateUserRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    role_id: Optional[int] = None
    # Student-only fields
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    dob: Optional[str] = Field(default=None, description="Date of birth as an ISO date (YYYY-MM-DD).")
    class_code: Optional[str] = None
    # Teacher-only: subjects the teacher is qualified for (validated, not stored)
    subject_ids: Optional[List[int]] = None
    # Parent-only: children to link
    student_ids: Optional[List[int]] = None


class UpdateUserRequest(BaseModel):
    """
    Partial update. Only fields that are explicitly set are applied; `role_id`
    may be repeated but never changed.
    """
    username: Optional[str] = None
    role_id: Optional[int] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    dob: Optional[str] = None
    class_code: Optional[str] = None
    subject_ids: Optional[List[int]] = None
    student_ids: Optional[List[int]] = None


class ResetPasswordRequest(BaseModel):
    new_password: str


# --- Response Models ---

class CreatedResponse(BaseModel):
    id: int


class UserListItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    username: str
    role_id: int
    role_name: str
    created_at: Optional[datetime] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    class_code: Optional[str] = None


class StudentProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    student_id: int
    first_name: str
    last_name: str
    dob: date
    class_code: str


class LinkedStudent(BaseModel):
    student_id: int
    first_name: str
    last_name: str
    class_code: str


class LinkedParent(BaseModel):
    parent_id: int
    username: str


class TeacherClassRef(BaseModel):
    class_id: int
    class_code: str
    title: str


class TeacherAssignmentRef(BaseModel):
    class_subject_id: int
    class_title: str
    subject_name: str


class UserDetails(BaseModel):
    user_id: int
    username: str
    role_id: int
    role_name: str
    created_at: Optional[datetime] = None
    student: Optional[StudentProfile] = None
    teacher_id: Optional[int] = None
    parent_id: Optional[int] = None
    parents: List[LinkedParent] = Field(default_factory=list)
    children: List[LinkedStudent] = Field(default_factory=list)
    homeroom_classes: List[TeacherClassRef] = Field(default_factory=list)
    assignments: List[TeacherAssignmentRef] = Field(default_factory=list)


class TeacherOption(BaseModel):
    teacher_id: int
    user_id: int
    username: str


class StudentOption(BaseModel):
    student_id: int
    user_id: int
    first_name: str
    last_name: str
    class_code: str
