import os

_MODULES = {
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
    "dev": "config.development",
    "development": "config.development",
}


def get_settings_module() -> str:
    """Settings module for APP_ENV; APP_SETTINGS names a custom module instead."""
    custom = os.getenv("APP_SETTINGS")
    if custom:
        return custom

    env = os.getenv("APP_ENV", "development").strip().lower()
    return _MODULES.get(env, "config.development")
