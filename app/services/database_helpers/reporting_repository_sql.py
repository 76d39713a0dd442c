# /app/services/database_helpers/reporting_repository_sql.py

"""
Read-only aggregate queries for the dashboard. Nothing here writes, so these
methods can run outside `run_in_transaction`.
"""

from datetime import date
from typing import Dict, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db.models.user_models import Role as RoleRecord, User
from app.db.models.school_models import Class, Subject, Enrollment, Period, Attendance


class ReportingRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def count_users_per_role(self) -> Dict[str, int]:
        rows = (
            self.db.query(RoleRecord.name, func.count(User.user_id))
            .outerjoin(User, User.role_id == RoleRecord.role_id)
            .group_by(RoleRecord.role_id, RoleRecord.name)
            .order_by(RoleRecord.role_id)
            .all()
        )
        return {name: count for name, count in rows}

    def count_classes(self) -> int:
        return self.db.query(func.count(Class.class_id)).scalar()

    def count_subjects(self) -> int:
        return self.db.query(func.count(Subject.subject_id)).scalar()

    def get_attendance_between(self, since: date, until: date) -> List[Dict]:
        """
        Attendance rows from periods dated `since` through `until` inclusive,
        each tagged with the homeroom class of the enrollment it belongs to.
        """
        rows = (
            self.db.query(
                Attendance.att_id,
                Attendance.status,
                Attendance.justification,
                Attendance.approved,
                Period.period_date,
                Class.class_id,
                Class.class_code,
                Class.title,
            )
            .join(Period, Attendance.period_id == Period.period_id)
            .join(Enrollment, Attendance.enroll_id == Enrollment.enroll_id)
            .join(Class, Enrollment.class_id == Class.class_id)
            .filter(Period.period_date >= since, Period.period_date <= until)
            .all()
        )
        return [dict(row._mapping) for row in rows]
