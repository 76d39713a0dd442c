# /app/models/settings_model.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class SystemSettings(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    school_name: str
    current_year: str
    school_address: Optional[str] = None
    session_timeout: int
    grade_scale: str
    maintenance_mode: bool
    updated_at: Optional[datetime] = None


class UpdateSettingsRequest(BaseModel):
    school_name: Optional[str] = None
    current_year: Optional[str] = None
    school_address: Optional[str] = None
    session_timeout: Optional[int] = None
    grade_scale: Optional[str] = None
    maintenance_mode: Optional[bool] = None
