# /app/services/dashboard_service.py

# --- Core Imports ---
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional

import pandas as pd

from app.core.config import get_settings
from ..models.dashboard_model import AttendanceStats, BestClass, DashboardSummary
from .database_service import DatabaseService

ATTENDED_STATUSES = ("P", "L")


def round_percent(part: int, total: int) -> float:
    """Percentage of `part` in `total`, rounded half-up to one decimal place."""
    if not total:
        return 0.0
    value = Decimal(part) * 100 / Decimal(total)
    return float(value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def calculate_attendance_stats(records: List[Dict]) -> AttendanceStats:
    """
    Computes counts and percentages for a list of attendance records. Each record
    needs a `status` ('P', 'A' or 'L'). An absence counts as justified when it
    carries a non-blank `justification` that was approved; its percentage is
    taken over absences, not over all records.
    """
    if not records:
        return AttendanceStats()

    df = pd.DataFrame(records)
    status_counts = df["status"].value_counts().to_dict()
    total = len(df)
    present = int(status_counts.get("P", 0))
    absent = int(status_counts.get("A", 0))
    late = int(status_counts.get("L", 0))

    justified = 0
    if "approved" in df.columns and "justification" in df.columns:
        has_reason = df["justification"].fillna("").astype(str).str.strip() != ""
        justified = int(((df["status"] == "A") & has_reason & df["approved"].eq(True)).sum())

    return AttendanceStats(
        total=total,
        present=present,
        absent=absent,
        late=late,
        justified=justified,
        present_percent=round_percent(present, total),
        absent_percent=round_percent(absent, total),
        late_percent=round_percent(late, total),
        justified_percent=round_percent(justified, absent),
    )


def find_best_attendance_class(records: List[Dict], min_sample: int) -> Optional[BestClass]:
    """
    Ranks classes by the share of records where the student attended (present or
    late). Classes with fewer than `min_sample` records are left out so a class
    with a handful of entries cannot win by chance.
    """
    if not records:
        return None

    df = pd.DataFrame(records)
    df["attended"] = df["status"].isin(ATTENDED_STATUSES)
    per_class = (
        df.groupby(["class_id", "class_code", "title"])
        .agg(records=("attended", "size"), attended=("attended", "sum"))
        .reset_index()
    )
    per_class = per_class[per_class["records"] >= min_sample]
    if per_class.empty:
        return None

    per_class["ratio"] = per_class["attended"] / per_class["records"]
    best = per_class.sort_values(
        by=["ratio", "records", "class_code"], ascending=[False, False, True]
    ).iloc[0]

    return BestClass(
        class_id=int(best["class_id"]),
        class_code=str(best["class_code"]),
        title=str(best["title"]),
        attendance_percent=round_percent(int(best["attended"]), int(best["records"])),
        records=int(best["records"]),
    )


# --- Core Public Function ---

def get_summary_data(db: DatabaseService, today: Optional[date] = None) -> DashboardSummary:
    """
    Calculates the admin dashboard widgets: users per role, entity totals, and
    attendance over the trailing window of `window_days` calendar days ending
    on `today`, both ends included.

    Args:
        db: An instance of the DatabaseService, provided by dependency injection.
        today: Reference date for the attendance window; defaults to today.

    Returns:
        A DashboardSummary Pydantic object.
    """
    settings = get_settings()
    window_days = settings.attendance_window_days
    until = today or date.today()
    since = until - timedelta(days=window_days - 1)

    users_per_role = db.count_users_per_role()
    records = db.get_attendance_between(since, until)

    return DashboardSummary(
        usersPerRole=users_per_role,
        totalUsers=sum(users_per_role.values()),
        classCount=db.count_classes(),
        subjectCount=db.count_subjects(),
        assignmentCount=db.count_assignments(),
        windowDays=window_days,
        attendance=calculate_attendance_stats(records),
        bestClass=find_best_attendance_class(records, settings.best_class_min_sample),
    )
