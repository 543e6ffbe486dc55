"""Schemas module initialization."""

from app.schemas.history import (
    Address,
    Job,
    GapPeriod,
    GapDetectionResult,
    PeriodType,
)
from app.schemas.form import (
    FormStep,
    FormProgress,
    NavigationState,
    NavigationResponse,
    StepHistoryPayload,
)

__all__ = [
    "Address",
    "Job",
    "GapPeriod",
    "GapDetectionResult",
    "PeriodType",
    "FormStep",
    "FormProgress",
    "NavigationState",
    "NavigationResponse",
    "StepHistoryPayload",
]
