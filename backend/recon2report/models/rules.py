"""
Rule corpus domain model.

A :class:`ServiceRuleSet` groups every attack technique known for one
network service together with the ports, scanner service names and
operating systems it applies to.  Instances are built once by the rule
loader and shared read-only by every evaluation, so all types here are
frozen and hold tuples rather than lists.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Command:
    """A single tool invocation suggested by an attack vector.

    Attributes:
        tool: Executable name (e.g. ``nxc``, ``smbclient``).
        syntax: Raw command line containing placeholders such as ``<ip>``.
        description: Optional operator-facing note.
    """

    tool: str
    syntax: str
    description: Optional[str] = None


@dataclass(frozen=True)
class Outcome:
    """A named result an attack vector may yield.

    Outcomes are informational only; they are never fed back into the
    assessment state automatically.

    Attributes:
        state_id: Machine-readable identifier (``"domain_admin"``).
        display_name: Label as written in the rule document (``"Domain Admin"``).
    """

    state_id: str
    display_name: str


@dataclass(frozen=True)
class AttackVector:
    """One attack technique.

    Attributes:
        id: Unique identifier within the rule set (e.g. ``"smb-anon"``).
        name: Display name.
        prerequisites: Raw prerequisite strings.  An entry equal to a phase
            keyword places the vector in that phase; the remaining entries
            are acquired-item requirements.
        outcomes: Possible results of running the vector.
        commands: Ordered commands implementing the technique.
        description: Free-text explanation.
        declared_phase: The ``phase`` field of the source document, kept
            verbatim for display.  Evaluation derives the effective phase
            from :attr:`prerequisites` instead.
    """

    id: str
    name: str
    prerequisites: tuple[str, ...] = ()
    outcomes: tuple[Outcome, ...] = ()
    commands: tuple[Command, ...] = ()
    description: str = ""
    declared_phase: str = ""


@dataclass(frozen=True)
class ServiceRuleSet:
    """All attack vectors for one service or protocol.

    Attributes:
        service: Service display name (``"SMB"``).
        description: Short description of the service.
        ports: Ports the service listens on.  An empty tuple marks general
            guidance that applies regardless of scan results.
        service_names: Scanner service names matched case-insensitively
            against detected services (``"microsoft-ds"``).
        target_os: Operating systems the vectors apply to.  Empty, or
            containing ``"Any"``, disables OS filtering.
        vectors: Ordered attack vectors.
    """

    service: str
    description: str = ""
    ports: tuple[int, ...] = ()
    service_names: tuple[str, ...] = ()
    target_os: tuple[str, ...] = ()
    vectors: tuple[AttackVector, ...] = field(default_factory=tuple)
