from __future__ import annotations

import os


def get_settings_module() -> str:
    # APP_ENV selects the settings module; default is development.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "daycare_system.config.production"

    if env in {"test", "testing"}:
        return "daycare_system.config.testing"

    return "daycare_system.config.development"
