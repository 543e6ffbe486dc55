"""API dependencies for route handlers."""

from datetime import datetime

from fastapi import Depends

from app.config import get_settings, Settings
from app.core.clock import Clock, get_clock
from app.services.form.store import FormProgressStore, get_form_store


def get_settings_dep() -> Settings:
    """Dependency to get application settings."""
    return get_settings()


def get_clock_dep() -> Clock:
    """Dependency to get the wall clock."""
    return get_clock()


def get_now(clock: Clock = Depends(get_clock_dep)) -> datetime:
    """Dependency resolving the current time once per request."""
    return clock.now()


def get_form_store_dep() -> FormProgressStore:
    """Dependency to get form progress storage."""
    return get_form_store()
