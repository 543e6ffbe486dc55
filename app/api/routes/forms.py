"""
Application Form Navigation API Routes.

Endpoints for:
- Reading a session's form progress
- Moving between steps (gated by history gap checks)
- Acknowledging gap warnings
- Resetting a session
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_form_store_dep, get_now
from app.core.exceptions import FormNavigationError
from app.schemas.form import (
    AcknowledgeRequest,
    FormProgress,
    NavigationResponse,
    StepHistoryPayload,
)
from app.services.form import (
    FormProgressStore,
    acknowledge_gaps,
    build_navigation_state,
    go_to_next_step,
    go_to_previous_step,
    go_to_step,
    reset_progress,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/forms", tags=["Application Form"])


def _respond(
    session_id: str,
    progress: FormProgress,
    message: Optional[str] = None,
) -> NavigationResponse:
    return NavigationResponse(
        session_id=session_id,
        progress=progress,
        navigation=build_navigation_state(progress),
        message=message,
    )


@router.get("/{session_id}/progress", response_model=NavigationResponse)
async def get_progress(
    session_id: str,
    store: FormProgressStore = Depends(get_form_store_dep),
):
    """Get the current step and navigation flags for a form session."""
    progress = await store.get(session_id)
    return _respond(session_id, progress)


@router.post("/{session_id}/next", response_model=NavigationResponse)
async def next_step(
    session_id: str,
    payload: StepHistoryPayload,
    store: FormProgressStore = Depends(get_form_store_dep),
    now: datetime = Depends(get_now),
):
    """
    Advance to the next step.

    On the history steps the submitted addresses/jobs are analysed first.
    If a gap or overlap is found and not yet acknowledged, the session
    stays on the current step and the response carries the warning.
    """
    progress = await store.get(session_id)
    progress, message = go_to_next_step(progress, payload, now)
    await store.save(session_id, progress)

    return _respond(session_id, progress, message)


@router.post("/{session_id}/previous", response_model=NavigationResponse)
async def previous_step(
    session_id: str,
    store: FormProgressStore = Depends(get_form_store_dep),
    now: datetime = Depends(get_now),
):
    """Go back one step. No-op on the first step."""
    progress = go_to_previous_step(await store.get(session_id), now)
    await store.save(session_id, progress)

    return _respond(session_id, progress)


@router.post("/{session_id}/steps/{step}", response_model=NavigationResponse)
async def jump_to_step(
    session_id: str,
    step: int,
    store: FormProgressStore = Depends(get_form_store_dep),
    now: datetime = Depends(get_now),
):
    """Jump directly to a step."""
    progress = await store.get(session_id)
    try:
        progress = go_to_step(progress, step, now)
    except FormNavigationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    await store.save(session_id, progress)
    return _respond(session_id, progress)


@router.post("/{session_id}/acknowledge", response_model=NavigationResponse)
async def acknowledge(
    session_id: str,
    request: AcknowledgeRequest,
    store: FormProgressStore = Depends(get_form_store_dep),
    now: datetime = Depends(get_now),
):
    """Accept the gap warning on the address or employment history step."""
    progress = await store.get(session_id)
    try:
        progress = acknowledge_gaps(progress, request.step, now)
    except FormNavigationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    await store.save(session_id, progress)
    logger.info(f"Session {session_id} acknowledged gaps on step {request.step.name}")

    return _respond(session_id, progress)


@router.delete("/{session_id}", response_model=NavigationResponse)
async def reset(
    session_id: str,
    store: FormProgressStore = Depends(get_form_store_dep),
    now: datetime = Depends(get_now),
):
    """Discard a session's progress and start over."""
    await store.delete(session_id)
    return _respond(session_id, reset_progress(now), "Form progress reset")
