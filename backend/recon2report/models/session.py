"""
Session and target records kept by the assessment store.

A :class:`Session` groups the hosts of one engagement; a :class:`Target`
is a single host together with whatever the scan parser learned about it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from recon2report.models.scan import OpenPort


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Session:
    """A penetration-test engagement.

    Attributes:
        id: Hex UUID assigned by the store.
        name: Operator-chosen label.
        ip_range: Optional network range in scope (``"192.168.1.0/24"``),
            used for ``<ip_range>`` placeholders.
        created_at: Creation timestamp (UTC).
    """

    id: str
    name: str
    ip_range: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)


@dataclass
class Target:
    """A host under assessment.

    Attributes:
        id: Hex UUID assigned by the store.
        session_id: Owning session.
        ip: IPv4 address.
        os: Operating system declared by the operator (``"Windows"``).
        hostname: Hostname reported by the scan.
        domain_name: AD domain discovered by scan scripts.
        computer_name: NetBIOS computer name discovered by scan scripts.
        fqdn: Fully-qualified name discovered by scan scripts.
        os_guess: Scanner OS fingerprint.
        ports: Open ports from the last uploaded scan.
    """

    id: str
    session_id: str
    ip: str
    os: str = ""
    hostname: Optional[str] = None
    domain_name: Optional[str] = None
    computer_name: Optional[str] = None
    fqdn: Optional[str] = None
    os_guess: Optional[str] = None
    ports: list[OpenPort] = field(default_factory=list)

    @property
    def open_ports(self) -> list[int]:
        return [port.number for port in self.ports]

    @property
    def services(self) -> list[str]:
        return [
            port.service
            for port in self.ports
            if port.service and port.service != "unknown"
        ]
