"""
Multi-step form navigation with history gap gating.

The applicant form moves through six steps. Two of them (address
history and employment history) run the gap analyzer and block the
"Next" action while a gap or overlap is present, unless the applicant
has acknowledged the warning.

All functions here are pure: they take a FormProgress and return a new
one. Persisting progress is FormProgressStore's job.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from app.core.exceptions import InvalidAcknowledgementError, StepOutOfRangeError
from app.schemas.form import (
    STEP_LABELS,
    STEP_TITLES,
    TOTAL_STEPS,
    FormProgress,
    FormStep,
    NavigationState,
    StepHistoryPayload,
)
from app.schemas.history import GapDetectionResult, GapPeriod, PeriodType
from app.services.history import (
    check_for_employment_gaps,
    check_for_residency_gaps,
    is_residency_over_3_years,
)

logger = logging.getLogger(__name__)

HISTORY_STEPS = (FormStep.ADDRESS_HISTORY, FormStep.EMPLOYMENT_HISTORY)


def acknowledge_text(periods: List[GapPeriod]) -> str:
    """Button label for a gap warning."""
    has_overlaps = any(p.type == PeriodType.OVERLAP for p in periods)
    has_gaps = any(p.type == PeriodType.GAP for p in periods)

    if has_overlaps and not has_gaps:
        return "I Understand These Overlaps"
    return "I Understand, Continue Anyway"


def is_blocked(progress: FormProgress) -> bool:
    """Current step has an unacknowledged gap warning."""
    if progress.current_step == FormStep.ADDRESS_HISTORY:
        return progress.residency_gap_detected and not progress.residency_gaps_acknowledged
    if progress.current_step == FormStep.EMPLOYMENT_HISTORY:
        return progress.employment_gap_detected and not progress.employment_gaps_acknowledged
    return False


def _current_result(progress: FormProgress) -> Optional[GapDetectionResult]:
    if progress.current_step == FormStep.ADDRESS_HISTORY:
        return progress.residency_result
    if progress.current_step == FormStep.EMPLOYMENT_HISTORY:
        return progress.employment_result
    return None


def _same_result(
    result: Optional[GapDetectionResult],
    previous: Optional[GapDetectionResult],
) -> bool:
    # Compare by value; stored results come back from JSON
    if result is None or previous is None:
        return result is previous
    return result.model_dump() == previous.model_dump()


def build_navigation_state(progress: FormProgress) -> NavigationState:
    """Derive the navigation flags shown by the form controls."""
    step = progress.current_step
    blocked = is_blocked(progress)
    result = _current_result(progress)

    return NavigationState(
        current_step=step,
        title=STEP_TITLES[step],
        label=STEP_LABELS[step],
        is_first_step=step == 0,
        is_last_step=step == TOTAL_STEPS - 1,
        can_go_back=step > 0,
        can_go_next=step < TOTAL_STEPS - 1 and not blocked,
        progress_percentage=round((step + 1) / TOTAL_STEPS * 100, 2),
        blocked_by_gaps=blocked,
        acknowledge_text=acknowledge_text(result.periods) if blocked else None,
    )


def evaluate_step(
    progress: FormProgress,
    payload: StepHistoryPayload,
    now: datetime,
) -> FormProgress:
    """
    Run the history check that belongs to the current step.

    - Contact & Address decides whether previous addresses are needed.
    - Address History checks previous addresses for gaps and overlaps.
    - Employment History checks jobs for gaps, overlaps and coverage.

    A new result that differs from the stored one clears the matching
    acknowledgement, so the applicant must accept the new warning.
    """
    step = progress.current_step
    update = {"updated_at": now}

    if step == FormStep.CONTACT_ADDRESS:
        satisfied = is_residency_over_3_years(
            payload.current_from_month, payload.current_from_year, now
        )
        update["needs_additional_addresses"] = not satisfied
        update["current_from_month"] = payload.current_from_month
        update["current_from_year"] = payload.current_from_year

    elif step == FormStep.ADDRESS_HISTORY:
        from_month = payload.current_from_month or progress.current_from_month
        from_year = payload.current_from_year or progress.current_from_year
        update["current_from_month"] = from_month
        update["current_from_year"] = from_year

        if not progress.needs_additional_addresses or is_residency_over_3_years(
            from_month, from_year, now
        ):
            result = GapDetectionResult(gap_detected=False, periods=[])
        elif not (from_month and from_year):
            # Nothing to anchor the walk on yet
            result = None
        else:
            result = check_for_residency_gaps(
                payload.addresses, from_month, from_year, now
            )
        if not _same_result(result, progress.residency_result):
            update["residency_gaps_acknowledged"] = False
        update["residency_result"] = result

    elif step == FormStep.EMPLOYMENT_HISTORY:
        result = check_for_employment_gaps(payload.jobs, now)
        if not _same_result(result, progress.employment_result):
            update["employment_gaps_acknowledged"] = False
        update["employment_result"] = result

    return progress.model_copy(update=update)


def go_to_next_step(
    progress: FormProgress,
    payload: StepHistoryPayload,
    now: datetime,
) -> Tuple[FormProgress, Optional[str]]:
    """
    Evaluate the current step and advance if nothing blocks it.

    Returns:
        Updated progress and a message explaining why it did not advance
        (None when it did)
    """
    progress = evaluate_step(progress, payload, now)

    if is_blocked(progress):
        logger.info(f"Navigation blocked by history gaps on step {progress.current_step.name}")
        return progress, "History gaps detected. Fix or acknowledge them to continue."

    if progress.current_step >= TOTAL_STEPS - 1:
        return progress, "Already on the last step"

    return progress.model_copy(update={"current_step": FormStep(progress.current_step + 1)}), None


def go_to_previous_step(progress: FormProgress, now: datetime) -> FormProgress:
    if progress.current_step == 0:
        return progress
    return progress.model_copy(
        update={"current_step": FormStep(progress.current_step - 1), "updated_at": now}
    )


def go_to_step(progress: FormProgress, step: int, now: datetime) -> FormProgress:
    """Jump to a step, e.g. from the progress stepper."""
    if not 0 <= step < TOTAL_STEPS:
        raise StepOutOfRangeError(step, TOTAL_STEPS)
    return progress.model_copy(update={"current_step": FormStep(step), "updated_at": now})


def acknowledge_gaps(progress: FormProgress, step: FormStep, now: datetime) -> FormProgress:
    """Record that the applicant accepted the gap warning on a history step."""
    if step == FormStep.ADDRESS_HISTORY:
        field = "residency_gaps_acknowledged"
    elif step == FormStep.EMPLOYMENT_HISTORY:
        field = "employment_gaps_acknowledged"
    else:
        raise InvalidAcknowledgementError(step)

    return progress.model_copy(update={field: True, "updated_at": now})


def reset_progress(now: datetime) -> FormProgress:
    return FormProgress(updated_at=now)
