# /app/models/class_model.py

from typing import Optional

from pydantic import BaseModel, Field


class CreateClassRequest(BaseModel):
    class_code: Optional[str] = Field(default=None, max_length=10)
    title: Optional[str] = Field(default=None, max_length=100)
    homeroom_teacher_id: Optional[int] = None


class UpdateClassRequest(BaseModel):
    class_code: Optional[str] = Field(default=None, max_length=10)
    title: Optional[str] = Field(default=None, max_length=100)
    homeroom_teacher_id: Optional[int] = None


class AssignHomeroomRequest(BaseModel):
    teacher_id: int


class EnrollStudentRequest(BaseModel):
    student_id: int


class Class(BaseModel):
    class_id: int
    class_code: str
    title: str
    homeroom_teacher_id: Optional[int] = None


class ClassSummary(Class):
    homeroom_teacher_name: Optional[str] = None
    subject_count: int = 0
    student_count: int = 0
