# /app/services/settings_service.py

import logging

from app.core.errors import Outcome, RequiredFieldMissing, ValidationError
from app.models.settings_model import SystemSettings, UpdateSettingsRequest
from app.models.user_model import ActorContext
from .database_service import DatabaseService

logger = logging.getLogger(__name__)


def get_system_settings(db: DatabaseService) -> SystemSettings:
    outcome = db.run_in_transaction(
        lambda: SystemSettings.model_validate(db.get_settings()), description="load settings"
    )
    if not outcome:
        raise outcome.error
    return outcome.value


def update_system_settings(request: UpdateSettingsRequest, db: DatabaseService, actor: ActorContext) -> Outcome[SystemSettings]:
    update_data = request.model_dump(exclude_unset=True)
    for name in ("school_name", "current_year"):
        if name in update_data:
            value = (update_data[name] or "").strip()
            if not value:
                return Outcome.failure(RequiredFieldMissing(name))
            update_data[name] = value
    if "session_timeout" in update_data:
        timeout = update_data["session_timeout"]
        if timeout is None or timeout <= 0:
            return Outcome.failure(ValidationError("Session timeout must be a positive number of minutes."))
    if update_data.get("grade_scale") is not None:
        update_data["grade_scale"] = update_data["grade_scale"].strip()
    if update_data.get("school_address") is not None:
        update_data["school_address"] = update_data["school_address"].strip()

    outcome = db.run_in_transaction(
        lambda: SystemSettings.model_validate(db.update_settings(update_data)),
        description="update settings",
    )
    if outcome:
        logger.info("Admin %s updated system settings: %s", actor.user_id, sorted(update_data))
    return outcome
