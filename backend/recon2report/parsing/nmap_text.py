"""
Nmap normal-output parser.

Simplified companion to :mod:`recon2report.parsing.nmap_xml` for operators
who paste the ``PORT STATE SERVICE VERSION`` table printed by ``nmap`` (or
saved with ``-oN``).  It reads one host's worth of ports and does not
extract hostnames or domain information.
"""

from __future__ import annotations

import re

from recon2report.models.scan import OpenPort

_PORT_LINE = re.compile(
    r"^(?P<port>\d{1,5})/(?P<proto>tcp|udp)\s+"
    r"(?P<state>\S+)\s+"
    r"(?P<service>\S+)"
    r"(?:\s+(?P<version>.+))?$",
    re.IGNORECASE,
)


def parse_open_ports(text: str) -> list[OpenPort]:
    """Extract open ports from nmap's tabular text output.

    Lines that do not look like port rows are ignored, as are ports whose
    state is anything other than ``open``.  Repeated ``(port, protocol)``
    pairs keep their first occurrence.

    Args:
        text: Raw nmap output.

    Returns:
        Open ports ordered by port number.  Never raises.
    """
    if not text:
        return []

    seen: set[tuple[int, str]] = set()
    ports: list[OpenPort] = []

    for raw_line in text.splitlines():
        match = _PORT_LINE.match(raw_line.strip())
        if match is None:
            continue
        if match.group("state").lower() != "open":
            continue

        number = int(match.group("port"))
        if not 1 <= number <= 65535:
            continue

        protocol = match.group("proto").lower()
        key = (number, protocol)
        if key in seen:
            continue
        seen.add(key)

        version = match.group("version")
        ports.append(
            OpenPort(
                number=number,
                protocol=protocol,
                service=match.group("service"),
                version=version.strip() if version else None,
            )
        )

    ports.sort(key=lambda port: port.number)
    return ports
