"""
History Analysis API Routes.

Endpoints for:
- Residency requirement check
- Residency gap/overlap detection
- Employment gap/overlap detection
- Employment duration
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends

from app.api.deps import get_now
from app.schemas.history import (
    EmploymentGapRequest,
    GapDetectionResult,
    JobDurationResponse,
    ResidencyGapRequest,
    ResidencyRequirementRequest,
    ResidencyRequirementResponse,
)
from app.services.history import (
    calculate_job_duration,
    check_for_employment_gaps,
    check_for_residency_gaps,
    is_residency_over_3_years,
)
from app.services.history.dates import (
    COVERAGE_MONTHS,
    format_month_year,
    three_years_before,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/history", tags=["History Analysis"])


@router.post("/residency/requirement", response_model=ResidencyRequirementResponse)
async def check_residency_requirement(
    request: ResidencyRequirementRequest,
    now: datetime = Depends(get_now),
):
    """
    Check whether the current address alone covers the last 3 years.

    When it does not, the form asks for previous addresses.
    """
    satisfied = is_residency_over_3_years(
        request.current_from_month, request.current_from_year, now
    )
    return ResidencyRequirementResponse(
        satisfied=satisfied,
        threshold=format_month_year(three_years_before(now)),
    )


@router.post("/residency/gaps", response_model=GapDetectionResult, response_model_exclude_none=True)
async def detect_residency_gaps(
    request: ResidencyGapRequest,
    now: datetime = Depends(get_now),
):
    """
    Detect gaps and overlaps in the previous-address history.

    Incomplete address rows are ignored.
    """
    return check_for_residency_gaps(
        request.addresses,
        request.current_from_month,
        request.current_from_year,
        now,
    )


@router.post("/employment/gaps", response_model=GapDetectionResult)
async def detect_employment_gaps(
    request: EmploymentGapRequest,
    now: datetime = Depends(get_now),
):
    """
    Detect gaps, overlaps and insufficient coverage in employment history.

    Less than 36 months of total employment is flagged even without
    explicit gap periods.
    """
    return check_for_employment_gaps(request.jobs, now)


@router.post("/employment/duration", response_model=JobDurationResponse)
async def employment_duration(request: EmploymentGapRequest):
    """
    Sum the duration of all complete jobs in months.

    Concurrent jobs are counted once per job.
    """
    complete = [job for job in request.jobs if job.is_complete]
    total_months = calculate_job_duration(complete)

    return JobDurationResponse(
        total_months=total_months,
        required_months=COVERAGE_MONTHS,
        meets_requirement=total_months >= COVERAGE_MONTHS,
    )
