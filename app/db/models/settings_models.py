# /app/db/models/settings_models.py

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from sqlalchemy.sql import func

from ..base_class import Base


class SystemSettings(Base):
    """Single-row table holding school-wide settings edited from the admin panel."""
    __tablename__ = "system_settings"

    id = Column(Integer, primary_key=True)
    school_name = Column(String(100), nullable=False, default="High School Example")
    current_year = Column(String(20), nullable=False, default="2024/2025")
    school_address = Column(Text, nullable=True)
    session_timeout = Column(Integer, nullable=False, default=30)
    grade_scale = Column(String(20), nullable=False, default="1-5")
    maintenance_mode = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
