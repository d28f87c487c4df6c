"""
Shared FastAPI dependency functions for the Recon2Report API.

The assessment store and the rule engine are created once by
:func:`recon2report.main.create_app` and attached to ``app.state``.  The
functions here hand them to endpoint modules and provide the common
load-or-404 helpers.  Tests swap either object through
``app.dependency_overrides``.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status

from recon2report.engine.evaluation import RuleEngine
from recon2report.models.session import Session, Target
from recon2report.store.base import AssessmentStore


def get_store(request: Request) -> AssessmentStore:
    """Return the application's :class:`AssessmentStore`."""
    return request.app.state.store


def get_rule_engine(request: Request) -> RuleEngine:
    """Return the application's :class:`RuleEngine`.

    The engine wraps the corpus loaded at startup and is read-only, so the
    same instance serves every request.
    """
    return request.app.state.rule_engine


def validate_session_exists(
    session_id: str,
    store: AssessmentStore = Depends(get_store),
) -> Session:
    """Load a :class:`~recon2report.models.session.Session` or raise 404.

    Args:
        session_id: Id of the session to load.
        store: The assessment store (injected automatically).

    Returns:
        The stored session.

    Raises:
        HTTPException: *404 Not Found* if no session with the given id exists.
    """
    session = store.get_session(session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session with id '{session_id}' not found.",
        )
    return session


def validate_target_exists(
    target_id: str,
    store: AssessmentStore = Depends(get_store),
) -> Target:
    """Load a :class:`~recon2report.models.session.Target` or raise 404.

    Raises:
        HTTPException: *404 Not Found* if no target with the given id exists.
    """
    target = store.get_target(target_id)
    if target is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Target with id '{target_id}' not found.",
        )
    return target
