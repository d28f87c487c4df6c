"""
Rule corpus loader.

Reads service rule documents (JSON, one per service) and converts them
into immutable :class:`~recon2report.models.rules.ServiceRuleSet` objects.

Loading is isolated per document: :func:`load_corpus` logs and skips a
document that fails to parse and keeps going, so a single broken file
never prevents startup.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Mapping, Union

from pydantic import ValidationError

from recon2report.core.logging import get_logger
from recon2report.models.rules import AttackVector, Command, Outcome, ServiceRuleSet
from recon2report.rules.schema import CommandDocument, ServiceRuleDocument, VectorDocument

logger = get_logger(__name__)

_DATA_DIR: Path = Path(__file__).resolve().parent / "data"

# Leading executable token of a command line ("nxc smb <ip>" -> "nxc").
_TOOL_TOKEN = re.compile(r"^([a-zA-Z0-9\-_.]+)")

RuleDocument = Union[str, bytes, Mapping[str, Any]]


class RuleDocumentError(ValueError):
    """Raised when a rule document is not valid JSON or violates the schema."""


def default_rules_dir() -> Path:
    """Return the directory of the corpus shipped with the package."""
    return _DATA_DIR


def load_one(document: RuleDocument) -> ServiceRuleSet:
    """Convert a single rule document into a :class:`ServiceRuleSet`.

    Args:
        document: JSON text (``str`` or ``bytes``) or an already decoded
            mapping.

    Returns:
        The immutable rule set.

    Raises:
        RuleDocumentError: If the document is not valid JSON or does not
            match :class:`~recon2report.rules.schema.ServiceRuleDocument`.
    """
    try:
        if isinstance(document, (str, bytes)):
            parsed = ServiceRuleDocument.model_validate_json(document)
        else:
            parsed = ServiceRuleDocument.model_validate(document)
    except ValidationError as exc:
        raise RuleDocumentError(str(exc)) from exc

    return _to_rule_set(parsed)


def load_file(path: Union[str, Path]) -> ServiceRuleSet:
    """Read and convert the rule document stored at *path*.

    Raises:
        OSError: If the file cannot be read.
        RuleDocumentError: If its content is invalid.
    """
    return load_one(Path(path).read_bytes())


def load_corpus(directory: Union[str, Path]) -> list[ServiceRuleSet]:
    """Load every ``*.json`` document below *directory*.

    Files are visited recursively in sorted path order so that the corpus
    order, and therefore evaluation output order, is stable.

    Args:
        directory: Root directory of the corpus.

    Returns:
        The rule sets that loaded successfully.  May be empty.
    """
    root = Path(directory)
    if not root.is_dir():
        logger.warning(
            "Rule directory does not exist",
            extra={"action": "load_corpus", "target": str(root)},
        )
        return []

    rule_sets: list[ServiceRuleSet] = []
    for path in sorted(root.rglob("*.json")):
        try:
            rule_sets.append(load_file(path))
        except (OSError, RuleDocumentError) as exc:
            logger.warning(
                "Skipping rule document: %s",
                exc,
                extra={"action": "load_rule", "target": path.name},
            )

    logger.info(
        "Loaded %d rule set(s) with %d vector(s)",
        len(rule_sets),
        sum(len(rule_set.vectors) for rule_set in rule_sets),
        extra={"action": "load_corpus", "target": str(root)},
    )
    return rule_sets


# -- Conversion ----------------------------------------------------------------

def _to_rule_set(document: ServiceRuleDocument) -> ServiceRuleSet:
    return ServiceRuleSet(
        service=document.service,
        description=document.description,
        ports=tuple(document.ports),
        service_names=tuple(document.service_names),
        target_os=tuple(document.target_os),
        vectors=tuple(_to_vector(vector) for vector in document.vectors),
    )


def _to_vector(document: VectorDocument) -> AttackVector:
    return AttackVector(
        id=document.id,
        name=document.name,
        prerequisites=tuple(document.prerequisites),
        outcomes=tuple(to_outcome(label) for label in document.outcomes),
        commands=tuple(_to_command(command) for command in document.commands),
        description=document.description,
        declared_phase=document.phase,
    )


def _to_command(document: CommandDocument) -> Command:
    tool = document.tool
    if not tool:
        match = _TOOL_TOKEN.match(document.syntax.strip())
        tool = match.group(1) if match else "unknown"
    return Command(tool=tool, syntax=document.syntax, description=document.description)


def to_outcome(label: str) -> Outcome:
    """Build an :class:`Outcome` whose state id is *label* in snake case.

    ``"Domain Admin"`` becomes ``Outcome("domain_admin", "Domain Admin")``.
    """
    return Outcome(state_id=label.lower().replace(" ", "_"), display_name=label)
