# /app/models/subject_model.py

from typing import List, Optional

from pydantic import BaseModel, Field


class CreateSubjectRequest(BaseModel):
    name: str = Field(..., description="Subject name; surrounding whitespace is ignored.")


class UpdateSubjectRequest(BaseModel):
    name: Optional[str] = None


class Subject(BaseModel):
    subject_id: int
    name: str


class SubjectSummary(Subject):
    """A subject together with the titles of the classes it is taught in."""
    classes: List[str] = Field(default_factory=list)
    class_count: int = 0
