# /app/services/database_helpers/settings_repository_sql.py

from typing import Dict

from sqlalchemy.orm import Session

from app.db.models.settings_models import SystemSettings


class SettingsRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def get_settings(self) -> SystemSettings:
        """Returns the single settings row, inserting the defaults on first use."""
        settings = self.db.query(SystemSettings).order_by(SystemSettings.id).first()
        if settings is None:
            settings = SystemSettings(
                school_name="High School Example",
                current_year="2024/2025",
                school_address="",
                session_timeout=30,
                grade_scale="1-5",
                maintenance_mode=False,
            )
            self.db.add(settings)
            self.db.flush()
        return settings

    def update_settings(self, data: Dict) -> SystemSettings:
        settings = self.get_settings()
        for key, value in data.items():
            setattr(settings, key, value)
        self.db.flush()
        return settings
