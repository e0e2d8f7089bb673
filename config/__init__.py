"""Settings module selection for the rental back office."""

import os

_PRODUCTION = {"prod", "production"}
_TESTING = {"test", "testing"}


def get_settings_module() -> str:
    # APP_ENV picks the module; anything unrecognised runs with development settings.
    env = os.getenv("APP_ENV", "development").strip().lower()
    if env in _PRODUCTION:
        return "config.production"
    if env in _TESTING:
        return "config.testing"
    return "config.development"
