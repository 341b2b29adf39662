import os


def get_settings_module() -> str:
    # APP_ENV selects the settings module, defaulting to development.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "guard_roster.config.production"

    if env in {"test", "testing"}:
        return "guard_roster.config.testing"

    return "guard_roster.config.development"
