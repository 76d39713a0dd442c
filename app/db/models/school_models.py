# /app/db/models/school_models.py

"""
SQLAlchemy ORM models for the academic structure: subjects, homeroom classes,
class-subject assignments, and the downstream records (enrollments, periods,
grade items, grades, attendance) that the delete guards inspect.

No relationship here cascades deletes. Removing a referenced row must go
through the repositories, which check for dependents first.
"""

from sqlalchemy import (
    Column, Integer, String, Text, Date, Numeric, Boolean, ForeignKey, UniqueConstraint
)
from sqlalchemy.orm import relationship

from ..base_class import Base


class Subject(Base):
    __tablename__ = "subjects"

    subject_id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)


class Class(Base):
    """A homeroom class: a fixed cohort of students with one homeroom teacher."""
    __tablename__ = "classes"

    class_id = Column(Integer, primary_key=True, index=True)
    class_code = Column(String(10), unique=True, nullable=False)
    title = Column(String(100), nullable=False)
    homeroom_teacher_id = Column(Integer, ForeignKey("teachers.teacher_id"), nullable=True)

    homeroom_teacher = relationship("Teacher")


class ClassSubject(Base):
    """Binds a class, a subject, and the teacher who teaches it to that class."""
    __tablename__ = "class_subjects"
    __table_args__ = (
        UniqueConstraint("class_id", "subject_id", name="uq_class_subject"),
    )

    class_subject_id = Column(Integer, primary_key=True, index=True)
    class_id = Column(Integer, ForeignKey("classes.class_id"), nullable=False)
    subject_id = Column(Integer, ForeignKey("subjects.subject_id"), nullable=False)
    teacher_id = Column(Integer, ForeignKey("teachers.teacher_id"), nullable=False)
    schedule = Column(String(255), nullable=True)

    class_ = relationship("Class")
    subject = relationship("Subject")
    teacher = relationship("Teacher")


class Enrollment(Base):
    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("student_id", "class_id", name="uq_enrollment"),
    )

    enroll_id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.student_id"), nullable=False)
    class_id = Column(Integer, ForeignKey("classes.class_id"), nullable=False)


class Period(Base):
    __tablename__ = "periods"

    period_id = Column(Integer, primary_key=True, index=True)
    class_subject_id = Column(Integer, ForeignKey("class_subjects.class_subject_id"), nullable=False)
    period_date = Column(Date, nullable=False)
    period_label = Column(String(50), nullable=False)


class GradeItem(Base):
    __tablename__ = "grade_items"

    item_id = Column(Integer, primary_key=True, index=True)
    class_subject_id = Column(Integer, ForeignKey("class_subjects.class_subject_id"), nullable=False)
    name = Column(String(100), nullable=False)
    max_points = Column(Numeric(5, 2), nullable=False)
    weight = Column(Numeric(3, 2), default=1.00)


class Grade(Base):
    __tablename__ = "grades"

    grade_id = Column(Integer, primary_key=True, index=True)
    enroll_id = Column(Integer, ForeignKey("enrollments.enroll_id"), nullable=False)
    item_id = Column(Integer, ForeignKey("grade_items.item_id"), nullable=False)
    points = Column(Numeric(5, 2), nullable=False)
    comment = Column(Text, nullable=True)


class Attendance(Base):
    __tablename__ = "attendance"
    __table_args__ = (
        UniqueConstraint("enroll_id", "period_id", name="uq_attendance"),
    )

    att_id = Column(Integer, primary_key=True, index=True)
    enroll_id = Column(Integer, ForeignKey("enrollments.enroll_id"), nullable=False)
    period_id = Column(Integer, ForeignKey("periods.period_id"), nullable=False)
    status = Column(String(1), nullable=False)  # 'P', 'A' or 'L'
    justification = Column(Text, nullable=True)
    approved = Column(Boolean, nullable=True)
    reject_reason = Column(Text, nullable=True)
    justification_file = Column(String(255), nullable=True)
