"""
Rule evaluation engine for Recon2Report.

Matches an :class:`~recon2report.models.state.AssessmentState` against the
loaded rule corpus and returns the attack vectors that apply right now.
A vector applies when all of the following hold:

1. Its rule set is *relevant*: the rule set declares no ports (general
   guidance), or one of its ports is open, or one of its service-name
   aliases was detected.
2. Its phase (see :func:`~recon2report.engine.phases.vector_phase`) equals
   the normalised current phase.
3. It has no item prerequisites, or the tester holds **any one** of them.
   The OR is intentional: a vector is surfaced as soon as one path to it
   is plausible.
4. The rule set's target OS list is unrestricted, the target OS is not
   known yet, or one declared OS occurs in the target OS string.

The engine is a pure function of ``(corpus, state)``: it never mutates
either and returns the same result for the same input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Collection, Iterable, Optional, Sequence

from recon2report.core.logging import get_logger
from recon2report.engine.phases import Phase, item_prerequisites, normalize_phase, vector_phase
from recon2report.models.rules import AttackVector, ServiceRuleSet
from recon2report.models.state import AssessmentState

logger = get_logger(__name__)

_ANY_OS: str = "any"


@dataclass(frozen=True)
class ApplicableVector:
    """An attack vector together with the service it was declared under.

    Attributes:
        service: :attr:`~recon2report.models.rules.ServiceRuleSet.service`
            of the originating rule set.
        vector: The vector itself.
    """

    service: str
    vector: AttackVector


class RuleEngine:
    """Evaluate assessment states against a fixed rule corpus.

    The corpus is captured as a tuple at construction time and is only
    ever read afterwards, so one engine can be shared by any number of
    concurrent callers.

    Example::

        engine = RuleEngine(load_corpus(default_rules_dir()))
        state = AssessmentState.build(
            current_phase="no_creds",
            open_ports=[445, 88],
            target_os="Windows",
        )
        for item in engine.evaluate(state):
            print(item.service, item.vector.name)
    """

    def __init__(self, corpus: Optional[Iterable[ServiceRuleSet]] = None) -> None:
        self._corpus: tuple[ServiceRuleSet, ...] = tuple(corpus or ())

    @property
    def services(self) -> tuple[ServiceRuleSet, ...]:
        """Every loaded rule set, in corpus order."""
        return self._corpus

    def evaluate(self, state: AssessmentState) -> list[ApplicableVector]:
        """Return the vectors applicable to *state*.

        Args:
            state: Current engagement snapshot.

        Returns:
            Applicable vectors in corpus order, then declaration order.
        """
        phase = normalize_phase(state.current_phase)
        acquired = {item.strip().lower() for item in state.acquired_items}
        services = {service.strip().lower() for service in state.services}

        results: list[ApplicableVector] = []
        for rule_set in self._corpus:
            if not _is_relevant(rule_set, state.open_ports, services):
                continue
            if not _os_compatible(rule_set.target_os, state.target_os):
                continue
            for vector in rule_set.vectors:
                if vector_phase(vector) is not phase:
                    continue
                if not _prerequisites_met(vector, acquired):
                    continue
                results.append(ApplicableVector(service=rule_set.service, vector=vector))

        logger.debug(
            "Evaluated phase %s: %d applicable vector(s)",
            phase.value,
            len(results),
            extra={"action": "evaluate", "target": state.target_os or "-"},
        )
        return results

    def vectors_for_phase(self, phase: Optional[str]) -> list[ApplicableVector]:
        """Return every vector of *phase*, ignoring ports, OS and prerequisites.

        Used for the reference (cheat-sheet) view.  *phase* is normalised
        exactly as in :meth:`evaluate`.
        """
        wanted: Phase = normalize_phase(phase)
        return [
            ApplicableVector(service=rule_set.service, vector=vector)
            for rule_set in self._corpus
            for vector in rule_set.vectors
            if vector_phase(vector) is wanted
        ]


# -- Module-level helpers ------------------------------------------------------

def evaluate(corpus: Sequence[ServiceRuleSet], state: AssessmentState) -> list[ApplicableVector]:
    """Functional form of :meth:`RuleEngine.evaluate`."""
    return RuleEngine(corpus).evaluate(state)


def vectors_for_phase(corpus: Sequence[ServiceRuleSet], phase: Optional[str]) -> list[ApplicableVector]:
    """Functional form of :meth:`RuleEngine.vectors_for_phase`."""
    return RuleEngine(corpus).vectors_for_phase(phase)


def _is_relevant(
    rule_set: ServiceRuleSet,
    open_ports: Collection[int],
    services: set[str],
) -> bool:
    if not rule_set.ports:
        return True
    if any(port in open_ports for port in rule_set.ports):
        return True
    return any(alias.strip().lower() in services for alias in rule_set.service_names)


def _prerequisites_met(vector: AttackVector, acquired: set[str]) -> bool:
    required = item_prerequisites(vector)
    if not required:
        return True
    return any(item.strip().lower() in acquired for item in required)


def _os_compatible(declared: Sequence[str], target_os: Optional[str]) -> bool:
    if not declared or any(os_name.strip().lower() == _ANY_OS for os_name in declared):
        return True
    # Hosts that have not been fingerprinted yet are not filtered out.
    if not target_os or not target_os.strip():
        return True
    target = target_os.lower()
    return any(os_name.strip().lower() in target for os_name in declared if os_name.strip())
