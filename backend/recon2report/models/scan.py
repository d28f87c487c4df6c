"""
Parsed scan results.

Output types of the nmap parsers in :mod:`recon2report.parsing`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class OpenPort:
    """An open port reported by the scanner.

    Attributes:
        number: Port number (1--65535).
        protocol: Transport protocol, ``tcp`` or ``udp``.
        service: Scanner service name (``"microsoft-ds"``), if reported.
        version: ``"{product} {version}"`` or whichever part was reported.
    """

    number: int
    protocol: str
    service: Optional[str] = None
    version: Optional[str] = None


@dataclass(frozen=True)
class HostScanRecord:
    """Everything the parser learned about one live host.

    Attributes:
        ip_address: IPv4 address of the host.
        hostname: First hostname reported by the scanner.
        ports: Open ports only, in document order.
        domain_name: ``Domain name`` value from script output.
        computer_name: ``Computer name`` value from script output.
        fqdn: ``FQDN`` value from script output.
        os_guess: Best OS match, e.g. ``"Windows Server 2019 (96% accuracy)"``.
    """

    ip_address: str
    hostname: Optional[str] = None
    ports: tuple[OpenPort, ...] = ()
    domain_name: Optional[str] = None
    computer_name: Optional[str] = None
    fqdn: Optional[str] = None
    os_guess: Optional[str] = None

    @property
    def open_ports(self) -> list[int]:
        """Port numbers of :attr:`ports`."""
        return [port.number for port in self.ports]

    @property
    def services(self) -> list[str]:
        """Distinct known service names, in port order."""
        names: list[str] = []
        for port in self.ports:
            if port.service and port.service != "unknown" and port.service not in names:
                names.append(port.service)
        return names
