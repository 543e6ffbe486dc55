"""Multi-step application form navigation schemas."""

from datetime import datetime
from enum import IntEnum
from typing import Optional, List

from pydantic import BaseModel, Field

from app.schemas.history import Address, GapDetectionResult, HistoryModel, Job


class FormStep(IntEnum):
    """Steps of the driver application form, in order."""

    PERSONAL_INFO = 0
    CONTACT_ADDRESS = 1
    LICENSE_INFO = 2
    ADDRESS_HISTORY = 3
    EMPLOYMENT_HISTORY = 4
    BACKGROUND_CHECK = 5


STEP_TITLES = {
    FormStep.PERSONAL_INFO: "Personal Information",
    FormStep.CONTACT_ADDRESS: "Contact & Address",
    FormStep.LICENSE_INFO: "License Information",
    FormStep.ADDRESS_HISTORY: "Address History",
    FormStep.EMPLOYMENT_HISTORY: "Employment History",
    FormStep.BACKGROUND_CHECK: "Background Check",
}

STEP_LABELS = {
    FormStep.PERSONAL_INFO: "Personal Info",
    FormStep.CONTACT_ADDRESS: "Contact & Address",
    FormStep.LICENSE_INFO: "License Info",
    FormStep.ADDRESS_HISTORY: "Address History",
    FormStep.EMPLOYMENT_HISTORY: "Employment",
    FormStep.BACKGROUND_CHECK: "Background Check",
}

TOTAL_STEPS = len(FormStep)


class FormProgress(BaseModel):
    """Per-session navigation state of an application form."""

    current_step: FormStep = FormStep.PERSONAL_INFO
    needs_additional_addresses: bool = False

    # Move-in month/year of the current address, from the contact step
    current_from_month: Optional[int] = None
    current_from_year: Optional[int] = None

    # Latest analysis per history step
    residency_result: Optional[GapDetectionResult] = None
    employment_result: Optional[GapDetectionResult] = None

    # Set by the applicant from the gap warning
    residency_gaps_acknowledged: bool = False
    employment_gaps_acknowledged: bool = False

    updated_at: Optional[datetime] = None

    @property
    def residency_gap_detected(self) -> bool:
        return bool(self.residency_result and self.residency_result.gap_detected)

    @property
    def employment_gap_detected(self) -> bool:
        return bool(self.employment_result and self.employment_result.gap_detected)


class StepHistoryPayload(HistoryModel):
    """Snapshot of the form fields the history checks read."""

    current_from_month: Optional[int] = Field(None, ge=0, le=12)
    current_from_year: Optional[int] = Field(None, ge=0)
    addresses: List[Address] = Field(default_factory=list)
    jobs: List[Job] = Field(default_factory=list)


class AcknowledgeRequest(BaseModel):
    """Applicant accepted the gap warning on a history step."""

    step: FormStep


class NavigationState(BaseModel):
    """Derived navigation flags for the current step."""

    current_step: FormStep
    title: str
    label: str
    total_steps: int = TOTAL_STEPS
    is_first_step: bool
    is_last_step: bool
    can_go_back: bool
    can_go_next: bool
    progress_percentage: float = Field(..., ge=0, le=100)
    blocked_by_gaps: bool = False
    acknowledge_text: Optional[str] = Field(
        None, description="Label for the warning's acknowledge button"
    )


class NavigationResponse(BaseModel):
    """Result of a navigation request."""

    session_id: str
    progress: FormProgress
    navigation: NavigationState
    message: Optional[str] = None
