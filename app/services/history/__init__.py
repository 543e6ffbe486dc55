"""History analysis services initialization."""

from app.services.history.gap_detection import (
    calculate_job_duration,
    check_for_employment_gaps,
    check_for_residency_gaps,
    is_residency_over_3_years,
)

__all__ = [
    "calculate_job_duration",
    "check_for_employment_gaps",
    "check_for_residency_gaps",
    "is_residency_over_3_years",
]
