"""
Tests for the phase taxonomy.
"""

from __future__ import annotations

import pytest

from recon2report.engine.phases import Phase, item_prerequisites, normalize_phase, vector_phase
from recon2report.models.rules import AttackVector


@pytest.mark.parametrize(
    ("alias", "expected"),
    [
        ("no_creds", Phase.RECONNAISSANCE),
        ("nocreds", Phase.RECONNAISSANCE),
        ("recon", Phase.RECONNAISSANCE),
        ("initial_access", Phase.RECONNAISSANCE),
        ("valid_user", Phase.CREDENTIAL_ACCESS),
        ("user_found", Phase.CREDENTIAL_ACCESS),
        ("authenticated", Phase.LATERAL_MOVEMENT),
        ("privesc", Phase.PRIVILEGE_ESCALATION),
        ("admin", Phase.DOMAIN_ADMIN),
        ("domainadmin", Phase.DOMAIN_ADMIN),
        ("post_exploitation", Phase.PERSISTENCE),
    ],
)
def test_aliases(alias: str, expected: Phase) -> None:
    assert normalize_phase(alias) is expected


@pytest.mark.parametrize("phase", list(Phase))
def test_canonical_names_map_to_themselves(phase: Phase) -> None:
    assert normalize_phase(phase.value) is phase


def test_case_and_whitespace_are_ignored() -> None:
    assert normalize_phase("  Credential_Access ") is Phase.CREDENTIAL_ACCESS
    assert normalize_phase("NO_CREDS") is Phase.RECONNAISSANCE


@pytest.mark.parametrize("value", [None, "", "   ", "exfiltration"])
def test_unknown_values_default_to_reconnaissance(value) -> None:
    assert normalize_phase(value) is Phase.RECONNAISSANCE


def test_vector_phase_uses_first_keyword() -> None:
    vector = AttackVector(
        id="v",
        name="v",
        prerequisites=("hash", "Lateral_Movement", "credential_access"),
    )

    assert vector_phase(vector) is Phase.LATERAL_MOVEMENT


def test_vector_without_keyword_is_reconnaissance() -> None:
    vector = AttackVector(id="v", name="v", prerequisites=("username",))

    assert vector_phase(vector) is Phase.RECONNAISSANCE


def test_item_prerequisites_drop_phase_keywords() -> None:
    vector = AttackVector(
        id="v",
        name="v",
        prerequisites=("credential_access", "username", "password"),
    )

    assert item_prerequisites(vector) == ["username", "password"]
