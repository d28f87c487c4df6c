"""
Pydantic v2 schemas for scan upload and nmap helper endpoints.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from recon2report.api.schemas.common import CamelModel, PortSchema

_EXAMPLE_XML: str = (
    '<?xml version="1.0"?><nmaprun><host><status state="up"/>'
    '<address addr="192.168.1.10" addrtype="ipv4"/>'
    '<ports><port protocol="tcp" portid="445"><state state="open"/>'
    '<service name="microsoft-ds"/></port></ports></host></nmaprun>'
)


class NmapOutput(CamelModel):
    """Raw nmap output pasted by the operator (XML or normal output)."""

    nmap_output: str = Field(default="", examples=[_EXAMPLE_XML])


class HostResponse(CamelModel):
    """A host discovered by an uploaded scan.

    Attributes:
        target_id: Store id of the target the host was written to.  ``None``
            when the host was only parsed, not stored.
        ip_address: Host address.
        ports_detected: Number of open ports.
    """

    target_id: Optional[str] = None
    ip_address: str
    hostname: Optional[str] = None
    domain_name: Optional[str] = None
    computer_name: Optional[str] = None
    fqdn: Optional[str] = None
    os_guess: Optional[str] = None
    ports_detected: int = 0
    ports: list[PortSchema] = Field(default_factory=list)


class ScanUploadResponse(CamelModel):
    """Result of ``POST /api/v1/targets/{target_id}/scan``.

    Attributes:
        target_id: The target the upload was made against.
        ports_detected: Open ports now recorded on that target.
        ports: Those ports.
        host_count: Number of hosts in the scan.
        discovered_targets: One entry per host, in scan order.  The first
            entry is always the uploaded-to target.
    """

    target_id: str
    ports_detected: int = 0
    ports: list[PortSchema] = Field(default_factory=list)
    host_count: int = 0
    discovered_targets: list[HostResponse] = Field(default_factory=list)


class NmapSuggestRequest(CamelModel):
    """Payload for ``POST /api/v1/nmap/suggest``."""

    ip: str = Field(..., min_length=1, examples=["192.168.1.10"])
    os: str = Field(default="", examples=["Windows"])


class NmapCommandResponse(CamelModel):
    """A suggested nmap invocation (``command`` is ``"N/A"`` for notes)."""

    title: str
    command: str
    explanation: str
