"""
Pydantic v2 schemas for attack-path suggestion endpoints.
"""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, Field

from recon2report.api.schemas.common import CamelModel
from recon2report.engine.evaluation import ApplicableVector
from recon2report.engine.phases import vector_phase
from recon2report.engine.templating import RenderContext, render_command


class SuggestRequest(CamelModel):
    """Payload for ``POST /api/v1/attack-paths/suggest``.

    Attributes:
        current_phase: Free-form phase (``"no_creds"``, ``"credential_access"``).
        acquired_items: Items the tester holds (``"username"``, ``"hash"``).
        open_ports: Open ports of the target.
        services: Scanner service names of the target.
        target_os: Target operating system, if known.
        target_ip: Substituted for ``<ip>``, ``<dc_ip>`` and ``<target>``.
        domain_name: Substituted for ``<domain>`` and ``<domain_name>``.
        ip_range: Substituted for ``<ip_range>``.  Falls back to the
            session's range when omitted.
        session_id: Optional session the request belongs to.
    """

    current_phase: str = Field(default="reconnaissance", examples=["no_creds"])
    acquired_items: list[str] = Field(default_factory=list, examples=[["username"]])
    open_ports: list[int] = Field(default_factory=list, examples=[[445, 88, 389]])
    services: list[str] = Field(default_factory=list, examples=[["microsoft-ds", "ldap"]])
    target_os: Optional[str] = Field(
        default=None,
        alias="targetOS",
        validation_alias=AliasChoices("targetOS", "targetOs", "target_os"),
        examples=["Windows"],
    )
    target_ip: Optional[str] = Field(default=None, examples=["192.168.1.10"])
    domain_name: Optional[str] = Field(default=None, examples=["corp.local"])
    ip_range: Optional[str] = Field(default=None, examples=["192.168.1.0/24"])
    session_id: Optional[str] = None


class CommandResponse(CamelModel):
    """A command of a vector.

    Attributes:
        tool: Executable name.
        syntax: Raw syntax with placeholders.
        description: Optional note.
        ready_command: Syntax with live values substituted.  ``None`` in the
            reference view.
    """

    tool: str
    syntax: str
    description: Optional[str] = None
    ready_command: Optional[str] = None


class VectorResponse(CamelModel):
    """An attack vector with its originating service."""

    id: str
    name: str
    service: str
    phase: str
    description: str = ""
    prerequisites: list[str] = Field(default_factory=list)
    possible_outcomes: list[str] = Field(default_factory=list)
    commands: list[CommandResponse] = Field(default_factory=list)

    @classmethod
    def from_applicable(
        cls,
        item: ApplicableVector,
        context: Optional[RenderContext] = None,
    ) -> "VectorResponse":
        """Build a response from an engine result.

        Args:
            item: Vector and originating service.
            context: Live values for ``readyCommand``.  When ``None`` the
                commands carry their raw syntax only.
        """
        vector = item.vector
        if context is None:
            commands = [
                CommandResponse(tool=c.tool, syntax=c.syntax, description=c.description)
                for c in vector.commands
            ]
        else:
            commands = [
                CommandResponse.model_validate(render_command(c, context))
                for c in vector.commands
            ]
        return cls(
            id=vector.id,
            name=vector.name,
            service=item.service,
            phase=vector_phase(vector).value,
            description=vector.description,
            prerequisites=list(vector.prerequisites),
            possible_outcomes=[outcome.display_name for outcome in vector.outcomes],
            commands=commands,
        )


class SuggestResponse(CamelModel):
    """Result of ``POST /api/v1/attack-paths/suggest``.

    Attributes:
        phase: The canonical phase the request was normalised to.
        applicable_vectors: Matching vectors with rendered commands.
    """

    phase: str
    applicable_vectors: list[VectorResponse] = Field(default_factory=list)


class ReferenceResponse(CamelModel):
    """Result of ``GET /api/v1/attack-paths/all``."""

    phase: str
    vectors: list[VectorResponse] = Field(default_factory=list)


class ServiceSummary(CamelModel):
    """A loaded rule set, without its vectors."""

    service: str
    description: str = ""
    ports: list[int] = Field(default_factory=list)
    service_names: list[str] = Field(default_factory=list)
    target_os: list[str] = Field(default_factory=list)
    vector_count: int = 0
