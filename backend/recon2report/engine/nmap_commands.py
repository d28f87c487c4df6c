"""
Curated nmap commands for the first look at a new target.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class NmapCommand:
    """A suggested scan.

    Attributes:
        title: Short label.
        command: Command line, or ``"N/A"`` for advisory notes.
        explanation: What the scan is for.
    """

    title: str
    command: str
    explanation: str


NOTE_COMMAND: str = "N/A"


def build_nmap_commands(ip: str, os: str = "") -> list[NmapCommand]:
    """Return the scan plan for *ip*, ordered from fastest to slowest.

    Args:
        ip: Target address.
        os: Operator's OS guess.  ``"Windows"`` (any case) adds SMB
            discovery scripts and a Windows note; anything else gets the
            Linux note.
    """
    commands = [
        NmapCommand(
            "Full TCP fast sweep",
            f"nmap -p- --min-rate 10000 -oN nmap_all_tcp.txt {ip}",
            "Discovers open TCP ports quickly; increase --min-rate for speed, "
            "decrease it for accuracy.",
        ),
        NmapCommand(
            "Default scripts & versions",
            f"nmap -sC -sV -oX nmap_default_scripts.xml {ip}",
            "Runs default NSE scripts and grabs service versions.  Upload the "
            "XML output to get attack suggestions.",
        ),
        NmapCommand(
            "Top 200 UDP",
            f"sudo nmap -sU --top-ports 200 -oN nmap_top_udp.txt {ip}",
            "UDP is slow and lossy; start with the top ports to catch DNS, SNMP and NTP.",
        ),
    ]

    if os.strip().lower() == "windows":
        commands.append(
            NmapCommand(
                "SMB host discovery",
                f"nmap -p 139,445 --script smb-os-discovery,smb2-security-mode -oX nmap_smb.xml {ip}",
                "Reveals the domain name, computer name and FQDN, and whether "
                "SMB signing is required.",
            )
        )
        commands.append(
            NmapCommand(
                "Windows note",
                NOTE_COMMAND,
                "If RDP (3389) or SMB (445) appear, plan SMB/RPC/RDP checks and "
                "Windows privilege escalation later.",
            )
        )
    else:
        commands.append(
            NmapCommand(
                "Linux note",
                NOTE_COMMAND,
                "If SSH (22) or web (80/443/8080) appear, plan enumeration "
                "(ssh-audit, gobuster, http-* NSE scripts).",
            )
        )
    return commands
