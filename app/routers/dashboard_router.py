# /app/routers/dashboard_router.py

# --- Core FastAPI Imports ---
from fastapi import APIRouter, Depends

# --- Service and Model Imports ---
from ..core.deps import require_admin
from ..models.dashboard_model import DashboardSummary
from ..models.user_model import ActorContext
from ..services import dashboard_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()


@router.get(
    "/summary",
    response_model=DashboardSummary,
    summary="Get Dashboard Summary",
    description="User counts per role, entity totals, and attendance over the trailing window."
)
def get_dashboard_summary(
    db: DatabaseService = Depends(get_db_service),
    actor: ActorContext = Depends(require_admin),
):
    # Delegate immediately to the service layer to get the summary data.
    return dashboard_service.get_summary_data(db=db)
