import os

_MODULES = {
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
}


def get_settings_module() -> str:
    """Settings module named by APP_ENV; unknown or unset means development."""
    return _MODULES.get(os.getenv("APP_ENV", "").strip().lower(), "config.development")
