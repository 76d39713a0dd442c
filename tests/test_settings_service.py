# /tests/test_settings_service.py

from app.core.errors import RequiredFieldMissing, ValidationError
from app.models.settings_model import UpdateSettingsRequest
from app.services import settings_service


def test_defaults_are_created_on_first_read(db_service):
    settings = settings_service.get_system_settings(db_service)

    assert settings.session_timeout == 30
    assert settings.grade_scale == "1-5"
    assert settings.maintenance_mode is False


def test_partial_update(db_service, admin):
    outcome = settings_service.update_system_settings(
        UpdateSettingsRequest(school_name="  Riverside High  ", maintenance_mode=True),
        db=db_service, actor=admin,
    )

    assert outcome
    assert outcome.value.school_name == "Riverside High"
    assert outcome.value.maintenance_mode is True
    assert settings_service.get_system_settings(db_service).session_timeout == 30


def test_blank_school_name_is_rejected(db_service, admin):
    outcome = settings_service.update_system_settings(
        UpdateSettingsRequest(school_name="   "), db=db_service, actor=admin
    )

    assert isinstance(outcome.error, RequiredFieldMissing)


def test_session_timeout_must_be_positive(db_service, admin):
    outcome = settings_service.update_system_settings(
        UpdateSettingsRequest(session_timeout=0), db=db_service, actor=admin
    )

    assert isinstance(outcome.error, ValidationError)
