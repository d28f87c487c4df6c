"""
Command templating.

Substitutes live engagement values into the placeholder vocabulary used by
rule documents:

============================== =====================================
Placeholder                    Value
============================== =====================================
``<ip>``, ``<dc_ip>``,         target IP address
``<target>``
``<domain>``, ``<domain_name>`` AD / DNS domain
``<ip_range>``                 in-scope network range
``<port>``                     the open port, or all open ports
                               comma-joined
============================== =====================================

Placeholders match case-insensitively.  A placeholder whose value is not
supplied is left in the output verbatim so the operator can fill it in.

Substitution is purely textual.  Values come from the operator running the
assessment and are not quoted or escaped for any shell.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Sequence

from recon2report.models.rules import Command

_PLACEHOLDER = re.compile(
    r"<(ip|dc_ip|target|domain|domain_name|ip_range|port)>", re.IGNORECASE
)

_PLACEHOLDER_KEYS: dict[str, str] = {
    "ip": "ip",
    "dc_ip": "ip",
    "target": "ip",
    "domain": "domain",
    "domain_name": "domain",
    "ip_range": "ip_range",
    "port": "port",
}


@dataclass(frozen=True)
class RenderContext:
    """Values available for substitution.  ``None`` leaves a placeholder as is."""

    ip: Optional[str] = None
    domain: Optional[str] = None
    ip_range: Optional[str] = None
    open_ports: tuple[int, ...] = ()


@dataclass(frozen=True)
class RenderedCommand:
    """A command with both its raw syntax and the ready-to-run string."""

    tool: str
    syntax: str
    description: Optional[str]
    ready_command: str


def render(
    syntax: str,
    ip: Optional[str] = None,
    domain: Optional[str] = None,
    ip_range: Optional[str] = None,
    open_ports: Optional[Sequence[int]] = None,
) -> str:
    """Substitute placeholders in *syntax*.

    Args:
        syntax: Command line containing placeholders.
        ip: Replaces ``<ip>``, ``<dc_ip>`` and ``<target>``.
        domain: Replaces ``<domain>`` and ``<domain_name>``.
        ip_range: Replaces ``<ip_range>``.
        open_ports: Replaces ``<port>`` with the single port, or with all
            ports joined by commas in the given order.

    Returns:
        The substituted command line.
    """
    values: dict[str, Optional[str]] = {
        "ip": ip or None,
        "domain": domain or None,
        "ip_range": ip_range or None,
        "port": ",".join(str(port) for port in open_ports) if open_ports else None,
    }

    def _substitute(match: re.Match[str]) -> str:
        value = values[_PLACEHOLDER_KEYS[match.group(1).lower()]]
        return match.group(0) if value is None else value

    # One pass: inserted values are never scanned again.
    return _PLACEHOLDER.sub(_substitute, syntax)


def render_command(command: Command, context: RenderContext) -> RenderedCommand:
    """Render *command* with the values in *context*."""
    return RenderedCommand(
        tool=command.tool,
        syntax=command.syntax,
        description=command.description,
        ready_command=render(
            command.syntax,
            ip=context.ip,
            domain=context.domain,
            ip_range=context.ip_range,
            open_ports=context.open_ports,
        ),
    )
