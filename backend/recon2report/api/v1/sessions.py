"""
Session endpoints.

A session groups the targets of one engagement and optionally records the
in-scope IP range used for ``<ip_range>`` placeholders.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from recon2report.api.deps import get_store, validate_session_exists
from recon2report.api.schemas.session import SessionCreate, SessionResponse, TargetResponse
from recon2report.models.session import Session
from recon2report.store.base import AssessmentStore, SessionNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an engagement session",
)
async def create_session(
    payload: SessionCreate,
    store: AssessmentStore = Depends(get_store),
) -> SessionResponse:
    """Create a new, empty session."""
    session = store.create_session(payload.name, payload.ip_range)
    logger.info("Session %s created (%s).", session.id, session.name)
    return SessionResponse.model_validate(session)


@router.get(
    "/{session_id}",
    response_model=SessionResponse,
    summary="Get a session",
)
async def get_session(session: Session = Depends(validate_session_exists)) -> SessionResponse:
    return SessionResponse.model_validate(session)


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a session and its targets",
)
async def delete_session(
    session: Session = Depends(validate_session_exists),
    store: AssessmentStore = Depends(get_store),
) -> None:
    """Delete a session.  Every target in it is deleted as well."""
    try:
        store.delete_session(session.id)
    except SessionNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session with id '{session.id}' not found.",
        )
    logger.info("Session %s deleted.", session.id)


@router.get(
    "/{session_id}/targets",
    response_model=list[TargetResponse],
    summary="List the targets of a session",
)
async def list_session_targets(
    session: Session = Depends(validate_session_exists),
    store: AssessmentStore = Depends(get_store),
) -> list[TargetResponse]:
    """Return the session's targets in creation order."""
    try:
        targets = store.list_targets(session.id)
    except SessionNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session with id '{session.id}' not found.",
        )
    return [TargetResponse.model_validate(target) for target in targets]
