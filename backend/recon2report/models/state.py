"""
Assessment state consumed by the rule engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional


@dataclass(frozen=True)
class AssessmentState:
    """Snapshot of an engagement used to filter the rule corpus.

    Built fresh for every evaluation and never modified by the engine.

    Attributes:
        current_phase: Free-form phase name (``"no_creds"``,
            ``"credential_access"``, ...).  Normalised by the engine.
        acquired_items: Items the tester holds (``"username"``, ``"hash"``).
        open_ports: Open ports observed on the target.
        services: Scanner service names observed on the target.
        target_os: Operating system of the target, if known.
    """

    current_phase: str = "reconnaissance"
    acquired_items: frozenset[str] = field(default_factory=frozenset)
    open_ports: frozenset[int] = field(default_factory=frozenset)
    services: frozenset[str] = field(default_factory=frozenset)
    target_os: Optional[str] = None

    @classmethod
    def build(
        cls,
        current_phase: Optional[str] = None,
        acquired_items: Optional[Iterable[str]] = None,
        open_ports: Optional[Iterable[int]] = None,
        services: Optional[Iterable[str]] = None,
        target_os: Optional[str] = None,
    ) -> "AssessmentState":
        """Create a state from arbitrary iterables, tolerating ``None``."""
        return cls(
            current_phase=current_phase or "",
            acquired_items=frozenset(acquired_items or ()),
            open_ports=frozenset(open_ports or ()),
            services=frozenset(services or ()),
            target_os=target_os,
        )
