"""Nmap output parsers."""

from recon2report.parsing.nmap_text import parse_open_ports
from recon2report.parsing.nmap_xml import parse_hosts

__all__ = [
    "parse_hosts",
    "parse_open_ports",
]
