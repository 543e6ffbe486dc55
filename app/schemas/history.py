"""
Address and employment history schemas.

These mirror the rows of the address-history and employment-history
steps of the driver application form. Rows are deliberately lenient:
a half-filled row validates so that the analyzer can skip it instead of
rejecting the whole request.
"""

from enum import Enum
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class HistoryModel(BaseModel):
    """Base model accepting both snake_case and the form's camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HistoryInterval(HistoryModel):
    """Month/year bounded span shared by addresses and jobs."""

    from_month: Optional[int] = Field(None, ge=0, le=12, description="1-12, 0 if unset")
    from_year: Optional[int] = Field(None, ge=0, description="Four-digit year")
    to_month: Optional[int] = Field(None, ge=0, le=12, description="1-12, 0 if unset")
    to_year: Optional[int] = Field(None, ge=0, description="Four-digit year")

    @property
    def has_dates(self) -> bool:
        """All four month/year fields are filled in."""
        return bool(self.from_month and self.from_year and self.to_month and self.to_year)


class Address(HistoryInterval):
    """Previous residence."""

    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(
            self.address and self.city and self.state and self.zip and self.has_dates
        )


class Job(HistoryInterval):
    """Previous employer."""

    employer_name: Optional[str] = None
    position_held: Optional[str] = None
    business_name: Optional[str] = None
    company_email: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.employer_name and self.position_held and self.has_dates)


class PeriodType(str, Enum):
    """Kind of problem found in a history."""

    GAP = "gap"
    OVERLAP = "overlap"


class GapPeriod(HistoryModel):
    """Uncovered or double-claimed span, formatted MM/YYYY."""

    from_: str = Field(..., alias="from", description="First month, MM/YYYY")
    to: str = Field(..., description="Last month, MM/YYYY")
    type: PeriodType


class GapDetectionResult(HistoryModel):
    """Outcome of a history analysis."""

    gap_detected: bool
    periods: List[GapPeriod] = Field(default_factory=list)
    total_months: Optional[int] = Field(
        None, description="Summed job duration; employment only"
    )

    @property
    def gaps(self) -> List[GapPeriod]:
        return [p for p in self.periods if p.type == PeriodType.GAP]

    @property
    def overlaps(self) -> List[GapPeriod]:
        return [p for p in self.periods if p.type == PeriodType.OVERLAP]


class ResidencyRequirementRequest(HistoryModel):
    """Start of the applicant's current address."""

    current_from_month: int = Field(..., ge=1, le=12)
    current_from_year: int = Field(..., ge=1900)


class ResidencyRequirementResponse(HistoryModel):
    """Whether the current address alone covers the residency window."""

    satisfied: bool
    threshold: str = Field(..., description="Window start, MM/YYYY")


class ResidencyGapRequest(ResidencyRequirementRequest):
    """Previous addresses plus the start of the current address."""

    addresses: List[Address] = Field(default_factory=list)


class EmploymentGapRequest(HistoryModel):
    """Employment history rows."""

    jobs: List[Job] = Field(default_factory=list)


class JobDurationResponse(HistoryModel):
    """Summed employment duration against the coverage requirement."""

    total_months: int
    required_months: int
    meets_requirement: bool
