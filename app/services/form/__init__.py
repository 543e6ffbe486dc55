"""Form services initialization."""

from app.services.form.navigator import (
    acknowledge_gaps,
    build_navigation_state,
    go_to_next_step,
    go_to_previous_step,
    go_to_step,
    reset_progress,
)
from app.services.form.store import FormProgressStore, get_form_store

__all__ = [
    "acknowledge_gaps",
    "build_navigation_state",
    "go_to_next_step",
    "go_to_previous_step",
    "go_to_step",
    "reset_progress",
    "FormProgressStore",
    "get_form_store",
]
