"""
Assessment store interface.

The HTTP layer keeps engagement bookkeeping (sessions and the targets
inside them) behind this interface so that the rule engine never touches
mutable state.  Implementations must serialise concurrent writes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from recon2report.models.session import Session, Target


class StoreError(LookupError):
    """Base class for store lookup failures."""


class SessionNotFoundError(StoreError):
    """Raised when an operation references an unknown session id."""


class TargetNotFoundError(StoreError):
    """Raised when an operation references an unknown target id."""


class AssessmentStore(ABC):
    """Storage for sessions and targets.

    ``get_*`` methods return ``None`` for unknown ids; mutating methods
    raise :class:`SessionNotFoundError` / :class:`TargetNotFoundError`.
    """

    @abstractmethod
    def create_session(self, name: str, ip_range: Optional[str] = None) -> Session:
        """Create and return a new session with a fresh id."""

    @abstractmethod
    def get_session(self, session_id: str) -> Optional[Session]:
        """Return the session, or ``None``."""

    @abstractmethod
    def delete_session(self, session_id: str) -> None:
        """Delete a session and every target that belongs to it."""

    @abstractmethod
    def create_target(self, session_id: str, ip: str, os: str = "", **details: object) -> Target:
        """Create a target inside *session_id*.

        Args:
            session_id: Owning session; must exist.
            ip: Target address.
            os: Operator-declared operating system.
            **details: Any other :class:`~recon2report.models.session.Target`
                field (``hostname``, ``ports``, ...).
        """

    @abstractmethod
    def get_target(self, target_id: str) -> Optional[Target]:
        """Return the target, or ``None``."""

    @abstractmethod
    def update_target(self, target: Target) -> Target:
        """Replace the stored target that has ``target.id``.

        Raises:
            TargetNotFoundError: If no such target exists.
            SessionNotFoundError: If ``target.session_id`` is unknown.
        """

    @abstractmethod
    def delete_target(self, target_id: str) -> None:
        """Delete a target."""

    @abstractmethod
    def list_targets(self, session_id: str) -> list[Target]:
        """Return the targets of a session in creation order."""
