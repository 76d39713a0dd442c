# /app/models/dashboard_model.py

# --- Core Imports ---
from typing import Dict, Optional

from pydantic import BaseModel, Field

# --- Model Definitions ---

class AttendanceStats(BaseModel):
    """Counts and one-decimal percentages for a set of attendance records."""
    total: int = 0
    present: int = 0
    absent: int = 0
    late: int = 0
    justified: int = 0
    present_percent: float = 0.0
    absent_percent: float = 0.0
    late_percent: float = 0.0
    justified_percent: float = 0.0


class BestClass(BaseModel):
    class_id: int
    class_code: str
    title: str
    attendance_percent: float
    records: int


class DashboardSummary(BaseModel):
    """
    Defines the data contract for the admin dashboard widgets: user counts,
    entity totals, and attendance over the trailing window.
    """
    usersPerRole: Dict[str, int] = Field(..., description="Number of users for each role name.", examples=[{"Teacher": 12}])
    totalUsers: int
    classCount: int
    subjectCount: int
    assignmentCount: int
    windowDays: int = Field(..., description="Size of the trailing attendance window in days.")
    attendance: AttendanceStats
    bestClass: Optional[BestClass] = None
