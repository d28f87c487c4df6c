"""
Engagement phase taxonomy.

Both read paths of the rule engine (filtered evaluation and the
unfiltered reference view) go through the two functions in this module,
so a request phase and a vector phase are always compared in the same
vocabulary.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from recon2report.models.rules import AttackVector


class Phase(str, Enum):
    """Canonical engagement phases, in the order an assessment moves through them."""

    RECONNAISSANCE = "reconnaissance"
    CREDENTIAL_ACCESS = "credential_access"
    LATERAL_MOVEMENT = "lateral_movement"
    PRIVILEGE_ESCALATION = "privilege_escalation"
    DOMAIN_ADMIN = "domain_admin"
    PERSISTENCE = "persistence"


PHASE_KEYWORDS: frozenset[str] = frozenset(phase.value for phase in Phase)

# Free-form names used by operators and older corpora.
_PHASE_ALIASES: dict[str, Phase] = {
    "no_creds": Phase.RECONNAISSANCE,
    "nocreds": Phase.RECONNAISSANCE,
    "recon": Phase.RECONNAISSANCE,
    "initial_access": Phase.RECONNAISSANCE,
    "valid_user": Phase.CREDENTIAL_ACCESS,
    "validuser": Phase.CREDENTIAL_ACCESS,
    "user_found": Phase.CREDENTIAL_ACCESS,
    "authenticated": Phase.LATERAL_MOVEMENT,
    "authenticated_user": Phase.LATERAL_MOVEMENT,
    "privesc": Phase.PRIVILEGE_ESCALATION,
    "admin": Phase.DOMAIN_ADMIN,
    "admin_access": Phase.DOMAIN_ADMIN,
    "domainadmin": Phase.DOMAIN_ADMIN,
    "post_exploitation": Phase.PERSISTENCE,
}


def normalize_phase(phase: Optional[str]) -> Phase:
    """Map a free-form phase name onto a canonical :class:`Phase`.

    Matching ignores case and surrounding whitespace.  Unknown, empty and
    ``None`` values fall back to :attr:`Phase.RECONNAISSANCE`.
    """
    key = (phase or "").strip().lower()
    if key in PHASE_KEYWORDS:
        return Phase(key)
    return _PHASE_ALIASES.get(key, Phase.RECONNAISSANCE)


def is_phase_keyword(value: str) -> bool:
    """Return ``True`` when *value* names a canonical phase."""
    return value.strip().lower() in PHASE_KEYWORDS


def vector_phase(vector: AttackVector) -> Phase:
    """Return the phase a vector belongs to.

    The first prerequisite that is a phase keyword wins; vectors without
    one are reconnaissance vectors.
    """
    for prerequisite in vector.prerequisites:
        if is_phase_keyword(prerequisite):
            return Phase(prerequisite.strip().lower())
    return Phase.RECONNAISSANCE


def item_prerequisites(vector: AttackVector) -> list[str]:
    """Return the prerequisites of *vector* that are not phase keywords."""
    return [p for p in vector.prerequisites if not is_phase_keyword(p)]
