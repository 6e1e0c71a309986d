"""FastAPI dependency injection — provides the survey store and driver.

Both are built once in the application lifespan and stashed on
``app.state``; they are read-only after startup, so concurrent requests
share them safely.  Each request gets its own answer map inside the driver.
"""

from fastapi import Request

from survey_rulesets.driver import SurveyDriver
from survey_rulesets.store import SurveyStore

from survey_server.config import ServerSettings


def get_store(request: Request) -> SurveyStore:
    """Return the SurveyStore singleton from ``app.state``."""
    return request.app.state.store


def get_driver(request: Request) -> SurveyDriver:
    """Return the SurveyDriver singleton from ``app.state``."""
    return request.app.state.driver


def get_settings(request: Request) -> ServerSettings:
    """Return the settings the app was created with."""
    return request.app.state.settings
