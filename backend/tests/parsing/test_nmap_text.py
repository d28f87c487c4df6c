"""
Tests for the nmap normal-output parser.
"""

from __future__ import annotations

from recon2report.parsing import parse_open_ports


def test_open_ports_sorted_and_deduplicated(nmap_text: str) -> None:
    ports = parse_open_ports(nmap_text)

    assert [(p.number, p.protocol) for p in ports] == [(22, "tcp"), (445, "tcp")]


def test_first_duplicate_row_wins(nmap_text: str) -> None:
    ssh = parse_open_ports(nmap_text)[0]

    assert ssh.service == "ssh"
    assert ssh.version == "OpenSSH 8.9p1 Ubuntu 3ubuntu0.6"


def test_version_is_optional() -> None:
    ports = parse_open_ports("21/tcp open ftp\n")

    assert ports[0].service == "ftp"
    assert ports[0].version is None


def test_same_port_different_protocol_is_kept() -> None:
    text = "53/tcp open domain\n53/udp open domain\n"

    assert [(p.number, p.protocol) for p in parse_open_ports(text)] == [(53, "tcp"), (53, "udp")]


def test_out_of_range_port_ignored() -> None:
    assert parse_open_ports("99999/tcp open unknown\n0/tcp open unknown\n") == []


def test_empty_and_garbage_input() -> None:
    assert parse_open_ports("") == []
    assert parse_open_ports("Nmap done: 0 IP addresses") == []
