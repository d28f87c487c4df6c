"""
Nmap helper endpoints.

Stateless utilities: curated scan commands for a host, and parsing of
pasted nmap output without storing anything.
"""

from __future__ import annotations

from fastapi import APIRouter

from recon2report.api.schemas.common import PortSchema
from recon2report.api.schemas.nmap import (
    HostResponse,
    NmapCommandResponse,
    NmapOutput,
    NmapSuggestRequest,
)
from recon2report.engine.nmap_commands import build_nmap_commands
from recon2report.parsing import parse_hosts, parse_open_ports

router = APIRouter()


@router.post(
    "/suggest",
    response_model=list[NmapCommandResponse],
    summary="Suggest nmap commands for a host",
)
async def suggest_nmap_commands(payload: NmapSuggestRequest) -> list[NmapCommandResponse]:
    """Return the curated scan sequence for *ip*.

    Windows hosts get an additional SMB discovery scan.  The final entry is
    an OS-specific note whose ``command`` is ``"N/A"``.
    """
    return [
        NmapCommandResponse(title=item.title, command=item.command, explanation=item.explanation)
        for item in build_nmap_commands(payload.ip, payload.os)
    ]


@router.post(
    "/parse",
    response_model=list[PortSchema],
    summary="Parse normal nmap output",
)
async def parse_nmap_text(payload: NmapOutput) -> list[PortSchema]:
    """Extract open ports from normal (``-oN``) output, sorted by port."""
    return [PortSchema.model_validate(port) for port in parse_open_ports(payload.nmap_output)]


@router.post(
    "/parse-xml",
    response_model=list[HostResponse],
    summary="Parse nmap XML output",
)
async def parse_nmap_xml(payload: NmapOutput) -> list[HostResponse]:
    """Return every live host with open ports found in ``-oX`` output.

    Malformed XML yields an empty list.
    """
    return [
        HostResponse(
            ip_address=host.ip_address,
            hostname=host.hostname,
            domain_name=host.domain_name,
            computer_name=host.computer_name,
            fqdn=host.fqdn,
            os_guess=host.os_guess,
            ports_detected=len(host.ports),
            ports=[PortSchema.model_validate(port) for port in host.ports],
        )
        for host in parse_hosts(payload.nmap_output)
    ]
