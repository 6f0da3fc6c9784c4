from backend.app.core.settings import get_settings


def test_settings_defaults():
    settings = get_settings()
    assert settings.app_name == "Invoice Studio"
    assert settings.environment == "development"
    assert isinstance(settings.secret_key, str) and settings.secret_key
    assert isinstance(settings.database_url, str) and settings.database_url
    assert settings.session_cookie_name == "session"
    assert settings.cors_origins


def test_database_config_enabled_in_development():
    settings = get_settings()
    assert settings.database_config_enabled is True
    assert settings.database_admin_emails == []
