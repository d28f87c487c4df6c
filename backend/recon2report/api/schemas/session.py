"""
Pydantic v2 schemas for session and target endpoints.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from recon2report.api.schemas.common import CamelModel, PortSchema


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


class SessionCreate(CamelModel):
    """Payload for ``POST /api/v1/sessions/``.

    Attributes:
        name: Engagement label.
        ip_range: Optional in-scope range used for ``<ip_range>`` placeholders.
    """

    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        examples=["ACME Corp Internal Pentest - Q4 2025"],
    )
    ip_range: Optional[str] = Field(default=None, examples=["192.168.1.0/24"])


class SessionResponse(CamelModel):
    """A stored session."""

    id: str
    name: str
    ip_range: Optional[str] = None
    created_at: datetime


# ---------------------------------------------------------------------------
# Targets
# ---------------------------------------------------------------------------


class TargetCreate(CamelModel):
    """Payload for ``POST /api/v1/targets/`` and ``PUT /api/v1/targets/{id}``.

    Ports are normally filled in by uploading a scan, but may be given
    directly.

    Attributes:
        session_id: Owning session.
        ip: Target address.
        os: Operator-declared operating system (``"Windows"``, ``"Linux"``).
    """

    session_id: str = Field(..., examples=["3f2b8c0e9d6a4c1e8f7a6b5c4d3e2f10"])
    ip: str = Field(..., min_length=1, examples=["192.168.1.10"])
    os: str = Field(default="", examples=["Windows"])
    hostname: Optional[str] = None
    domain_name: Optional[str] = None
    computer_name: Optional[str] = None
    fqdn: Optional[str] = None
    os_guess: Optional[str] = None
    ports: list[PortSchema] = Field(default_factory=list)

    @field_validator("ip", mode="after")
    @classmethod
    def strip_ip(cls, value: str) -> str:
        """Remove surrounding whitespace from the address."""
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("ip must not be blank.")
        return cleaned


class TargetResponse(CamelModel):
    """A stored target."""

    id: str
    session_id: str
    ip: str
    os: str = ""
    hostname: Optional[str] = None
    domain_name: Optional[str] = None
    computer_name: Optional[str] = None
    fqdn: Optional[str] = None
    os_guess: Optional[str] = None
    ports: list[PortSchema] = Field(default_factory=list)
