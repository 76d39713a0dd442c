# /app/routers/settings_router.py

from fastapi import APIRouter, Depends

from ..core.deps import require_admin, verify_csrf
from ..core.errors import ServiceError
from ..models.settings_model import SystemSettings, UpdateSettingsRequest
from ..models.user_model import ActorContext
from ..services import settings_service
from ..services.database_service import DatabaseService, get_db_service
from .outcome_handling import http_error_for, unwrap

router = APIRouter()


@router.get("", response_model=SystemSettings, summary="Get System Settings")
def get_settings(db: DatabaseService = Depends(get_db_service), actor: ActorContext = Depends(require_admin)):
    try:
        return settings_service.get_system_settings(db=db)
    except ServiceError as e:
        raise http_error_for(e)

@router.patch("", response_model=SystemSettings, summary="Update System Settings", dependencies=[Depends(verify_csrf)])
def update_settings(
    request: UpdateSettingsRequest,
    db: DatabaseService = Depends(get_db_service),
    actor: ActorContext = Depends(require_admin),
):
    return unwrap(settings_service.update_system_settings(request=request, db=db, actor=actor))
