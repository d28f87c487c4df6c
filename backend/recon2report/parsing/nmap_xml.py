"""
Nmap XML parser.

Turns ``nmap -oX`` output into one :class:`~recon2report.models.scan.HostScanRecord`
per live host.  Only ports reported exactly as ``open`` are kept, so no
command is ever suggested against a closed or filtered service.

The input is operator-pasted text and may be anything, so parsing goes
through :mod:`defusedxml` and every failure collapses to an empty result:
callers treat "no hosts" as "nothing usable was found".
"""

from __future__ import annotations

import re
from typing import Optional
from xml.etree.ElementTree import Element

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

from recon2report.core.logging import get_logger
from recon2report.models.scan import HostScanRecord, OpenPort

logger = get_logger(__name__)

# -- Script-output labels ------------------------------------------------------
# smb-os-discovery and friends print "Label: value" lines.
_SCRIPT_LABELS: dict[str, str] = {
    "domain name": "domain_name",
    "computer name": "computer_name",
    "fqdn": "fqdn",
}

_LABEL_LINE = re.compile(r"^\s*(?P<label>[^:]+?)\s*:\s*(?P<value>.*?)\s*$")


def parse_hosts(raw_scan_output: str) -> list[HostScanRecord]:
    """Parse nmap XML output into per-host records.

    Hosts are skipped when they are not ``up``, have no IPv4 address, or
    have no open port left after filtering.

    Args:
        raw_scan_output: The complete XML document as text.

    Returns:
        Host records in document order.  Empty for empty, malformed or
        non-XML input; this function never raises on bad input.
    """
    if not raw_scan_output or not raw_scan_output.strip():
        return []

    try:
        root = ET.fromstring(raw_scan_output.strip())
    except (ET.ParseError, DefusedXmlException, ValueError) as exc:
        logger.debug(
            "Scan output is not usable XML: %s",
            exc,
            extra={"action": "parse_hosts", "target": "-"},
        )
        return []

    host_elements = [root] if root.tag == "host" else root.findall("host")

    records: list[HostScanRecord] = []
    for host in host_elements:
        record = _parse_host(host)
        if record is not None:
            records.append(record)

    logger.debug(
        "Parsed %d live host(s) from %d host element(s)",
        len(records),
        len(host_elements),
        extra={"action": "parse_hosts", "target": "-"},
    )
    return records


def _parse_host(host: Element) -> Optional[HostScanRecord]:
    """Build a record for a single ``<host>`` element, or ``None`` to skip it."""
    status = host.find("status")
    if status is None or status.get("state") != "up":
        return None

    ip_address = _ipv4_address(host)
    if ip_address is None:
        return None

    ports = _open_ports(host)
    if not ports:
        return None

    identifiers = _script_identifiers(host)

    return HostScanRecord(
        ip_address=ip_address,
        hostname=_first_hostname(host),
        ports=tuple(ports),
        domain_name=identifiers.get("domain_name"),
        computer_name=identifiers.get("computer_name"),
        fqdn=identifiers.get("fqdn"),
        os_guess=_os_guess(host),
    )


def _ipv4_address(host: Element) -> Optional[str]:
    for address in host.findall("address"):
        if address.get("addrtype") == "ipv4" and address.get("addr"):
            return address.get("addr")
    return None


def _first_hostname(host: Element) -> Optional[str]:
    for hostname in host.findall("hostnames/hostname"):
        name = hostname.get("name")
        if name:
            return name
    return None


def _open_ports(host: Element) -> list[OpenPort]:
    ports: list[OpenPort] = []
    for port in host.findall("ports/port"):
        state = port.find("state")
        if state is None or state.get("state") != "open":
            continue

        try:
            number = int(port.get("portid", ""))
        except ValueError:
            continue
        if not 1 <= number <= 65535:
            continue

        service = port.find("service")
        name: Optional[str] = None
        version: Optional[str] = None
        if service is not None:
            name = service.get("name") or None
            version = _version_string(service.get("product"), service.get("version"))

        ports.append(
            OpenPort(
                number=number,
                protocol=port.get("protocol", "tcp"),
                service=name,
                version=version,
            )
        )
    return ports


def _version_string(product: Optional[str], version: Optional[str]) -> Optional[str]:
    if product and version:
        return f"{product} {version}"
    return product or version or None


def _os_guess(host: Element) -> Optional[str]:
    """Return the highest-accuracy ``osmatch`` for display."""
    best: Optional[Element] = None
    best_accuracy = -1
    for match in host.findall("os/osmatch"):
        try:
            accuracy = int(match.get("accuracy", ""))
        except ValueError:
            accuracy = 0
        if accuracy > best_accuracy:
            best, best_accuracy = match, accuracy

    if best is None or not best.get("name"):
        return None

    name = best.get("name")
    accuracy_text = best.get("accuracy")
    if accuracy_text:
        return f"{name} ({accuracy_text}% accuracy)"
    return name


def _script_identifiers(host: Element) -> dict[str, str]:
    """Collect domain/computer/FQDN values from every script block of *host*."""
    found: dict[str, str] = {}
    for script in host.iter("script"):
        output = script.get("output") or ""
        for line in output.splitlines():
            match = _LABEL_LINE.match(line)
            if match is None:
                continue
            key = _SCRIPT_LABELS.get(match.group("label").lower())
            value = match.group("value")
            if key and value and key not in found:
                found[key] = value
    return found
