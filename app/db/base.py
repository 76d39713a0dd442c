# /app/db/base.py

# This file acts as a central registry for all our SQLAlchemy models.
# By importing them all here, we ensure that the Base class knows about them
# when Alembic runs its auto-generation scan.

from .base_class import Base

from .models.user_models import Role, User, Student, Teacher, Parent, StudentParent
from .models.school_models import Subject, Class, ClassSubject, Enrollment, Period, GradeItem, Grade, Attendance
from .models.settings_models import SystemSettings
