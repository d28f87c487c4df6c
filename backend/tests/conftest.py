"""
Shared pytest fixtures for the Recon2Report test suite.

Provides a small, hand-written rule corpus, realistic nmap output samples,
a FastAPI test application with the store and rule engine overridden, and
an httpx client wired to it.
"""

from __future__ import annotations

import copy
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from recon2report.engine.evaluation import RuleEngine
from recon2report.models.rules import ServiceRuleSet
from recon2report.rules.loader import load_one
from recon2report.store.memory import InMemoryStore


# ---------------------------------------------------------------------------
# Rule corpus
# ---------------------------------------------------------------------------

SMB_DOCUMENT: dict = {
    "service": "SMB",
    "description": "Windows file sharing",
    "ports": [139, 445],
    "serviceNames": ["microsoft-ds", "netbios-ssn"],
    "targetOs": ["Windows"],
    "vectors": [
        {
            "id": "smb-anon",
            "name": "Anonymous share listing",
            "phase": "reconnaissance",
            "prerequisites": ["reconnaissance"],
            "commands": [
                {"tool": "smbclient", "syntax": "smbclient -L //<ip> -N"},
                {"tool": "nxc", "syntax": "nxc smb <ip> -u '' -p '' --shares"},
            ],
            "outcomes": ["Share access"],
        },
        {
            "id": "smb-spray",
            "name": "Password spraying",
            "phase": "credential_access",
            "prerequisites": ["credential_access", "username"],
            "commands": [
                {"syntax": "nxc smb <ip> -u users.txt -p passwords.txt"},
            ],
            "outcomes": ["Valid Credentials"],
        },
    ],
}

GENERAL_DOCUMENT: dict = {
    "service": "Network",
    "description": "Guidance that applies to every engagement",
    "ports": [],
    "vectors": [
        {
            "id": "net-sweep",
            "name": "Ping sweep",
            "prerequisites": [],
            "commands": [{"tool": "nmap", "syntax": "nmap -sn <ip_range>"}],
        },
        {
            "id": "net-find-dc",
            "name": "Locate domain controllers",
            "prerequisites": ["reconnaissance"],
            "commands": [
                {"tool": "nslookup", "syntax": "nslookup -type=SRV _ldap._tcp.dc._msdcs.<domain>"},
            ],
        },
    ],
}

SSH_DOCUMENT: dict = {
    "service": "SSH",
    "ports": [22],
    "serviceNames": ["ssh"],
    "targetOs": ["Linux"],
    "vectors": [
        {
            "id": "ssh-brute",
            "name": "SSH login brute force",
            "prerequisites": ["credential_access", "username", "password"],
            "commands": [
                {"tool": "hydra", "syntax": "hydra -L users.txt -P pass.txt ssh://<target>:<port>"},
            ],
        },
    ],
}

KERBEROS_DOCUMENT: dict = {
    "service": "Kerberos",
    "ports": [88],
    "serviceNames": ["kerberos-sec"],
    "targetOs": ["Any"],
    "vectors": [
        {
            "id": "krb-asreproast",
            "name": "AS-REP roasting",
            "prerequisites": ["credential_access", "username"],
            "commands": [
                {
                    "tool": "impacket-GetNPUsers",
                    "syntax": "impacket-GetNPUsers <domain>/ -usersfile users.txt -dc-ip <dc_ip>",
                },
            ],
            "outcomes": ["AS-REP hash"],
        },
        {
            "id": "krb-kerberoast",
            "name": "Kerberoasting",
            "prerequisites": ["credential_access", "password"],
            "commands": [
                {
                    "tool": "impacket-GetUserSPNs",
                    "syntax": "impacket-GetUserSPNs <DOMAIN>/<user>:<password> -dc-ip <DC_IP> -request",
                },
            ],
        },
    ],
}


@pytest.fixture()
def smb_document() -> dict:
    """Return the raw SMB rule document used by the sample corpus."""
    return copy.deepcopy(SMB_DOCUMENT)


@pytest.fixture()
def corpus() -> list[ServiceRuleSet]:
    """Return the sample corpus in a fixed order: SMB, Network, SSH, Kerberos."""
    return [
        load_one(SMB_DOCUMENT),
        load_one(GENERAL_DOCUMENT),
        load_one(SSH_DOCUMENT),
        load_one(KERBEROS_DOCUMENT),
    ]


@pytest.fixture()
def rule_engine(corpus: list[ServiceRuleSet]) -> RuleEngine:
    """Return a :class:`RuleEngine` over the sample corpus."""
    return RuleEngine(corpus)


# ---------------------------------------------------------------------------
# Nmap output samples
# ---------------------------------------------------------------------------

NMAP_XML: str = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE nmaprun>
<nmaprun scanner="nmap" args="nmap -sC -sV -O -oX scan.xml 192.168.1.0/24" version="7.94">
  <host>
    <status state="up" reason="echo-reply"/>
    <address addr="192.168.1.10" addrtype="ipv4"/>
    <address addr="00:0C:29:AA:BB:CC" addrtype="mac"/>
    <hostnames><hostname name="dc01.corp.local" type="PTR"/></hostnames>
    <ports>
      <port protocol="tcp" portid="88">
        <state state="open" reason="syn-ack"/>
        <service name="kerberos-sec" product="Microsoft Windows Kerberos"/>
      </port>
      <port protocol="tcp" portid="445">
        <state state="open" reason="syn-ack"/>
        <service name="microsoft-ds" product="Microsoft Windows Server 2019" version="10.0"/>
      </port>
      <port protocol="tcp" portid="3389">
        <state state="filtered" reason="no-response"/>
        <service name="ms-wbt-server"/>
      </port>
    </ports>
    <os>
      <osmatch name="Microsoft Windows Server 2016" accuracy="90"/>
      <osmatch name="Microsoft Windows Server 2019" accuracy="96"/>
    </os>
    <hostscript>
      <script id="smb-os-discovery" output="&#xa;  OS: Windows Server 2019 Standard 17763&#xa;  Computer name: DC01&#xa;  NetBIOS computer name: DC01\\x00&#xa;  Domain name: corp.local&#xa;  FQDN: DC01.corp.local&#xa;  System time: 2025-03-01T10:00:00+00:00&#xa;"/>
    </hostscript>
  </host>
  <host>
    <status state="up" reason="echo-reply"/>
    <address addr="192.168.1.20" addrtype="ipv4"/>
    <hostnames/>
    <ports>
      <port protocol="tcp" portid="22">
        <state state="open" reason="syn-ack"/>
        <service name="ssh" product="OpenSSH" version="8.9p1"/>
      </port>
      <port protocol="tcp" portid="80">
        <state state="closed" reason="reset"/>
        <service name="http"/>
      </port>
    </ports>
  </host>
  <host>
    <status state="down" reason="no-response"/>
    <address addr="192.168.1.30" addrtype="ipv4"/>
  </host>
  <host>
    <status state="up" reason="echo-reply"/>
    <address addr="192.168.1.40" addrtype="ipv4"/>
    <ports>
      <port protocol="tcp" portid="443">
        <state state="closed" reason="reset"/>
        <service name="https"/>
      </port>
    </ports>
  </host>
</nmaprun>
"""

NMAP_TEXT: str = """Starting Nmap 7.94 ( https://nmap.org )
Nmap scan report for 192.168.1.10
Host is up (0.00041s latency).
PORT     STATE         SERVICE       VERSION
445/tcp  open          microsoft-ds  Microsoft Windows Server 2019 microsoft-ds
22/tcp   open          ssh           OpenSSH 8.9p1 Ubuntu 3ubuntu0.6
80/tcp   closed        http
53/udp   open|filtered domain
22/tcp   open          ssh           duplicate row
Nmap done: 1 IP address (1 host up) scanned in 12.34 seconds
"""


@pytest.fixture()
def nmap_xml() -> str:
    """Return multi-host nmap XML: a DC, a Linux host, a down host and a closed-only host."""
    return NMAP_XML


@pytest.fixture()
def nmap_text() -> str:
    """Return nmap normal output with closed, ambiguous and duplicate rows."""
    return NMAP_TEXT


# ---------------------------------------------------------------------------
# FastAPI application with store and engine overrides
# ---------------------------------------------------------------------------

@pytest.fixture()
def store() -> InMemoryStore:
    """Return an empty in-memory store."""
    return InMemoryStore()


@pytest_asyncio.fixture()
async def test_app(store: InMemoryStore, rule_engine: RuleEngine):
    """Return a FastAPI application with the store and engine overridden.

    The overrides replace the production dependencies, which read
    ``app.state``, with the test fixtures.
    """
    from fastapi import FastAPI
    from recon2report.api.deps import get_rule_engine, get_store
    from recon2report.api.v1.router import router as v1_router

    app = FastAPI()
    app.include_router(v1_router, prefix="/api/v1")
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_rule_engine] = lambda: rule_engine

    yield app

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """Yield an httpx.AsyncClient wired to the test FastAPI app."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
