# /app/models/assignment_model.py

from typing import Optional

from pydantic import BaseModel


class CreateAssignmentRequest(BaseModel):
    class_id: int
    subject_id: int
    teacher_id: int
    schedule: Optional[str] = None


class UpdateAssignmentRequest(BaseModel):
    """Class and subject are fixed once assigned; only the teacher and schedule move."""
    teacher_id: Optional[int] = None
    schedule: Optional[str] = None


class AssignmentDetails(BaseModel):
    class_subject_id: int
    class_id: int
    class_code: str
    class_title: str
    subject_id: int
    subject_name: str
    teacher_id: int
    teacher_name: str
    schedule: Optional[str] = None
