"""
Tests for the rule evaluation engine.

Covers relevance by port and by service alias, phase filtering with
aliases, OR prerequisites, OS filtering, ordering, purity, the reference
view and a scan-to-command run through the bundled corpus.
"""

from __future__ import annotations

import pytest

from recon2report.engine.evaluation import RuleEngine, evaluate, vectors_for_phase
from recon2report.engine.templating import RenderContext, render_command
from recon2report.models.rules import ServiceRuleSet
from recon2report.models.state import AssessmentState
from recon2report.parsing import parse_hosts
from recon2report.rules.loader import default_rules_dir, load_corpus


def _ids(results) -> list[str]:
    return [item.vector.id for item in results]


# ---------------------------------------------------------------------------
# Relevance
# ---------------------------------------------------------------------------

def test_open_port_makes_service_relevant(rule_engine: RuleEngine) -> None:
    """Port 445 on a Windows host yields SMB recon vectors plus general guidance."""
    state = AssessmentState.build(
        current_phase="reconnaissance",
        open_ports=[445],
        target_os="Windows",
    )

    results = rule_engine.evaluate(state)

    assert _ids(results) == ["smb-anon", "net-sweep", "net-find-dc"]
    assert results[0].service == "SMB"


def test_service_alias_makes_service_relevant(rule_engine: RuleEngine) -> None:
    """A detected service name matches the rule set's aliases case-insensitively."""
    state = AssessmentState.build(services=["Microsoft-DS"], target_os="Windows")

    assert "smb-anon" in _ids(rule_engine.evaluate(state))


def test_portless_rule_set_always_relevant(rule_engine: RuleEngine) -> None:
    """General guidance is returned even when nothing was scanned."""
    state = AssessmentState.build(current_phase="reconnaissance")

    assert _ids(rule_engine.evaluate(state)) == ["net-sweep", "net-find-dc"]


def test_closed_service_not_relevant(rule_engine: RuleEngine) -> None:
    """Kerberos vectors need port 88 or a kerberos alias."""
    state = AssessmentState.build(
        current_phase="credential_access",
        acquired_items=["username"],
        open_ports=[445],
    )

    assert "krb-asreproast" not in _ids(rule_engine.evaluate(state))


# ---------------------------------------------------------------------------
# Phase
# ---------------------------------------------------------------------------

def test_phase_alias_is_normalised(rule_engine: RuleEngine) -> None:
    """'no_creds' evaluates exactly like 'reconnaissance'."""
    alias = AssessmentState.build(current_phase="no_creds", open_ports=[445])
    canonical = AssessmentState.build(current_phase="reconnaissance", open_ports=[445])

    assert _ids(rule_engine.evaluate(alias)) == _ids(rule_engine.evaluate(canonical))


def test_unknown_phase_falls_back_to_reconnaissance(rule_engine: RuleEngine) -> None:
    state = AssessmentState.build(current_phase="something-else", open_ports=[445])

    assert _ids(rule_engine.evaluate(state)) == ["smb-anon", "net-sweep", "net-find-dc"]


def test_vectors_of_other_phases_are_excluded(rule_engine: RuleEngine) -> None:
    """Reconnaissance never returns credential_access vectors, even with items."""
    state = AssessmentState.build(
        current_phase="reconnaissance",
        acquired_items=["username", "password"],
        open_ports=[445, 88, 22],
    )

    ids = _ids(rule_engine.evaluate(state))
    assert "smb-spray" not in ids
    assert "krb-asreproast" not in ids


# ---------------------------------------------------------------------------
# Prerequisites
# ---------------------------------------------------------------------------

def test_any_single_prerequisite_is_enough(rule_engine: RuleEngine) -> None:
    """ssh-brute lists username and password; holding a password suffices."""
    state = AssessmentState.build(
        current_phase="credential_access",
        acquired_items=["password"],
        open_ports=[22],
        target_os="Linux",
    )

    assert _ids(rule_engine.evaluate(state)) == ["ssh-brute"]


def test_missing_prerequisites_exclude_vector(rule_engine: RuleEngine) -> None:
    state = AssessmentState.build(
        current_phase="credential_access",
        open_ports=[445, 88],
        target_os="Windows",
    )

    assert rule_engine.evaluate(state) == []


def test_prerequisites_match_case_insensitively(rule_engine: RuleEngine) -> None:
    state = AssessmentState.build(
        current_phase="credential_access",
        acquired_items=["USERNAME"],
        open_ports=[445],
        target_os="Windows",
    )

    assert _ids(rule_engine.evaluate(state)) == ["smb-spray"]


def test_credential_phase_across_services(rule_engine: RuleEngine) -> None:
    """Only vectors whose prerequisites are met, on relevant and OS-compatible services."""
    state = AssessmentState.build(
        current_phase="credential_access",
        acquired_items=["username"],
        open_ports=[445, 88, 22],
        target_os="Windows Server 2019",
    )

    assert _ids(rule_engine.evaluate(state)) == ["smb-spray", "krb-asreproast"]


# ---------------------------------------------------------------------------
# Operating system
# ---------------------------------------------------------------------------

def test_os_mismatch_excludes_rule_set(rule_engine: RuleEngine) -> None:
    state = AssessmentState.build(open_ports=[445], target_os="Linux")

    assert _ids(rule_engine.evaluate(state)) == ["net-sweep", "net-find-dc"]


def test_unknown_os_does_not_filter(rule_engine: RuleEngine) -> None:
    state = AssessmentState.build(open_ports=[445], target_os=None)

    assert "smb-anon" in _ids(rule_engine.evaluate(state))


def test_os_match_is_substring_and_case_insensitive(rule_engine: RuleEngine) -> None:
    state = AssessmentState.build(
        open_ports=[445],
        target_os="Microsoft WINDOWS Server 2019 (96% accuracy)",
    )

    assert "smb-anon" in _ids(rule_engine.evaluate(state))


def test_any_os_rule_set_matches_every_target(rule_engine: RuleEngine) -> None:
    state = AssessmentState.build(
        current_phase="credential_access",
        acquired_items=["username"],
        open_ports=[88],
        target_os="FreeBSD",
    )

    assert _ids(rule_engine.evaluate(state)) == ["krb-asreproast"]


# ---------------------------------------------------------------------------
# Purity and edge cases
# ---------------------------------------------------------------------------

def test_empty_corpus_returns_nothing() -> None:
    state = AssessmentState.build(open_ports=[445])

    assert RuleEngine([]).evaluate(state) == []


def test_evaluation_is_repeatable(rule_engine: RuleEngine, corpus: list[ServiceRuleSet]) -> None:
    """Same corpus and state give the same result; neither is modified."""
    state = AssessmentState.build(
        current_phase="credential_access",
        acquired_items=["username"],
        open_ports=[445, 88],
    )
    before = list(corpus)

    first = rule_engine.evaluate(state)
    second = rule_engine.evaluate(state)

    assert first == second
    assert corpus == before
    assert state.acquired_items == frozenset({"username"})


def test_module_level_evaluate(corpus: list[ServiceRuleSet]) -> None:
    state = AssessmentState.build(open_ports=[445], target_os="Windows")

    assert _ids(evaluate(corpus, state)) == ["smb-anon", "net-sweep", "net-find-dc"]


# ---------------------------------------------------------------------------
# Reference view
# ---------------------------------------------------------------------------

def test_vectors_for_phase_ignores_ports_and_prerequisites(rule_engine: RuleEngine) -> None:
    ids = _ids(rule_engine.vectors_for_phase("credential_access"))

    assert ids == ["smb-spray", "ssh-brute", "krb-asreproast", "krb-kerberoast"]


@pytest.mark.parametrize("phase", ["no_creds", None, ""])
def test_vectors_for_phase_defaults_to_reconnaissance(
    corpus: list[ServiceRuleSet], phase
) -> None:
    ids = _ids(vectors_for_phase(corpus, phase))

    assert ids == ["smb-anon", "net-sweep", "net-find-dc"]


# ---------------------------------------------------------------------------
# Bundled corpus
# ---------------------------------------------------------------------------

def test_bundled_corpus_from_xml_scan_to_ready_command(nmap_xml: str) -> None:
    """Parse a scan, evaluate the DC with the bundled rules and render smb-anon."""
    engine = RuleEngine(load_corpus(default_rules_dir()))
    host = parse_hosts(nmap_xml)[0]
    state = AssessmentState.build(
        current_phase="no_creds",
        open_ports=host.open_ports,
        services=host.services,
        target_os=host.os_guess,
    )

    results = engine.evaluate(state)
    smb_anon = next(item for item in results if item.vector.id == "smb-anon")
    context = RenderContext(ip=host.ip_address, domain=host.domain_name)
    rendered = [render_command(command, context).ready_command for command in smb_anon.vector.commands]

    assert smb_anon.service == "SMB"
    assert rendered[0] == "smbclient -L //192.168.1.10 -N"
    assert rendered[1] == "nxc smb 192.168.1.10 -u '' -p '' --shares"
    assert all(item.vector.id.split("-")[0] != "ssh" for item in results)


@pytest.mark.parametrize(
    ("target_os", "expected", "unexpected"),
    [
        ("Linux", "ssh-linpeas", "winrm-winpeas"),
        ("Windows", "winrm-winpeas", "ssh-linpeas"),
    ],
)
def test_bundled_corpus_privilege_escalation_checklists(
    target_os: str, expected: str, unexpected: str
) -> None:
    """A shell on the host surfaces the OS-specific enumeration script."""
    engine = RuleEngine(load_corpus(default_rules_dir()))
    state = AssessmentState.build(
        current_phase="privilege_escalation",
        acquired_items=["shell"],
        open_ports=[22, 5985],
        target_os=target_os,
    )

    ids = _ids(engine.evaluate(state))

    assert expected in ids
    assert unexpected not in ids
