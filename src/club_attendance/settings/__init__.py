import os


def get_settings_module() -> str:
    # APP_ENV picks the settings module, default is development
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "club_attendance.settings.production"

    if env in {"test", "testing"}:
        return "club_attendance.settings.testing"

    return "club_attendance.settings.development"
