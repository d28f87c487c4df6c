"""
In-memory assessment store.

Everything lives in two dictionaries guarded by one lock; nothing
survives the process.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from threading import Lock
from typing import Optional

from recon2report.core.logging import get_logger
from recon2report.models.session import Session, Target
from recon2report.store.base import (
    AssessmentStore,
    SessionNotFoundError,
    TargetNotFoundError,
)

logger = get_logger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex


class InMemoryStore(AssessmentStore):
    """Thread-safe, process-local :class:`AssessmentStore`.

    Records are copied on the way in and out so callers can never modify
    stored state without going through the store.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._sessions: dict[str, Session] = {}
        self._targets: dict[str, Target] = {}

    # -- Sessions ---------------------------------------------------------

    def create_session(self, name: str, ip_range: Optional[str] = None) -> Session:
        session = Session(id=_new_id(), name=name, ip_range=ip_range)
        with self._lock:
            self._sessions[session.id] = session
        logger.info(
            "Session created",
            extra={"action": "create_session", "target": session.id},
        )
        return replace(session)

    def get_session(self, session_id: str) -> Optional[Session]:
        with self._lock:
            session = self._sessions.get(session_id)
        return replace(session) if session is not None else None

    def delete_session(self, session_id: str) -> None:
        with self._lock:
            if session_id not in self._sessions:
                raise SessionNotFoundError(session_id)
            del self._sessions[session_id]
            orphaned = [t.id for t in self._targets.values() if t.session_id == session_id]
            for target_id in orphaned:
                del self._targets[target_id]
        logger.info(
            "Session deleted with %d target(s)",
            len(orphaned),
            extra={"action": "delete_session", "target": session_id},
        )

    # -- Targets ----------------------------------------------------------

    def create_target(self, session_id: str, ip: str, os: str = "", **details: object) -> Target:
        target = Target(id=_new_id(), session_id=session_id, ip=ip, os=os, **details)  # type: ignore[arg-type]
        with self._lock:
            if session_id not in self._sessions:
                raise SessionNotFoundError(session_id)
            self._targets[target.id] = _copy_target(target)
        logger.info(
            "Target %s created",
            ip,
            extra={"action": "create_target", "target": target.id},
        )
        return _copy_target(target)

    def get_target(self, target_id: str) -> Optional[Target]:
        with self._lock:
            target = self._targets.get(target_id)
        return _copy_target(target) if target is not None else None

    def update_target(self, target: Target) -> Target:
        stored = _copy_target(target)
        with self._lock:
            if target.id not in self._targets:
                raise TargetNotFoundError(target.id)
            if target.session_id not in self._sessions:
                raise SessionNotFoundError(target.session_id)
            self._targets[target.id] = stored
        return _copy_target(stored)

    def delete_target(self, target_id: str) -> None:
        with self._lock:
            if target_id not in self._targets:
                raise TargetNotFoundError(target_id)
            del self._targets[target_id]

    def list_targets(self, session_id: str) -> list[Target]:
        with self._lock:
            if session_id not in self._sessions:
                raise SessionNotFoundError(session_id)
            targets = [t for t in self._targets.values() if t.session_id == session_id]
        return [_copy_target(t) for t in targets]


def _copy_target(target: Target) -> Target:
    return replace(target, ports=list(target.ports))
