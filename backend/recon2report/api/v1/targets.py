"""
Target CRUD and scan upload endpoints.

A target is one host inside a session.  Its open ports and identity
details are normally filled in by uploading nmap output to
``POST /targets/{target_id}/scan``.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from fastapi import APIRouter, Depends, HTTPException, status

from recon2report.api.deps import get_store, validate_target_exists
from recon2report.api.schemas.common import PortSchema
from recon2report.api.schemas.nmap import HostResponse, NmapOutput, ScanUploadResponse
from recon2report.api.schemas.session import TargetCreate, TargetResponse
from recon2report.models.scan import HostScanRecord, OpenPort
from recon2report.models.session import Target
from recon2report.parsing import parse_hosts, parse_open_ports
from recon2report.store.base import AssessmentStore, SessionNotFoundError, TargetNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter()

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _ports_from_payload(payload: TargetCreate) -> list[OpenPort]:
    return [
        OpenPort(
            number=port.number,
            protocol=port.protocol,
            service=port.service,
            version=port.version,
        )
        for port in payload.ports
    ]


def _port_schemas(ports: list[OpenPort]) -> list[PortSchema]:
    return [PortSchema.model_validate(port) for port in ports]


def _looks_like_xml(raw: str) -> bool:
    return raw.lstrip().startswith("<")


def _apply_host(target: Target, host: HostScanRecord) -> Target:
    """Return *target* with every scan-derived field taken from *host*.

    The operator-declared ``os`` is kept.
    """
    return replace(
        target,
        ip=host.ip_address,
        hostname=host.hostname,
        domain_name=host.domain_name,
        computer_name=host.computer_name,
        fqdn=host.fqdn,
        os_guess=host.os_guess,
        ports=list(host.ports),
    )


def _host_response(target: Target) -> HostResponse:
    return HostResponse(
        target_id=target.id,
        ip_address=target.ip,
        hostname=target.hostname,
        domain_name=target.domain_name,
        computer_name=target.computer_name,
        fqdn=target.fqdn,
        os_guess=target.os_guess,
        ports_detected=len(target.ports),
        ports=_port_schemas(target.ports),
    )


# ---------------------------------------------------------------------------
# POST /targets/
# ---------------------------------------------------------------------------


@router.post(
    "/",
    response_model=TargetResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a target inside a session",
)
async def create_target(
    payload: TargetCreate,
    store: AssessmentStore = Depends(get_store),
) -> TargetResponse:
    """Register a host in an existing session.

    Raises:
        HTTPException: *400 Bad Request* when the session does not exist.
    """
    try:
        target = store.create_target(
            payload.session_id,
            payload.ip,
            os=payload.os,
            hostname=payload.hostname,
            domain_name=payload.domain_name,
            computer_name=payload.computer_name,
            fqdn=payload.fqdn,
            os_guess=payload.os_guess,
            ports=_ports_from_payload(payload),
        )
    except SessionNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Session with id '{payload.session_id}' not found.",
        )

    logger.info("Target %s (%s) created in session %s.", target.id, target.ip, target.session_id)
    return TargetResponse.model_validate(target)


# ---------------------------------------------------------------------------
# GET /targets/{target_id}
# ---------------------------------------------------------------------------


@router.get(
    "/{target_id}",
    response_model=TargetResponse,
    summary="Get a target",
)
async def get_target(target: Target = Depends(validate_target_exists)) -> TargetResponse:
    """Return a single target with its open ports."""
    return TargetResponse.model_validate(target)


# ---------------------------------------------------------------------------
# PUT /targets/{target_id}
# ---------------------------------------------------------------------------


@router.put(
    "/{target_id}",
    response_model=TargetResponse,
    summary="Replace a target",
)
async def update_target(
    payload: TargetCreate,
    target: Target = Depends(validate_target_exists),
    store: AssessmentStore = Depends(get_store),
) -> TargetResponse:
    """Replace every field of a target except its id.

    Raises:
        HTTPException: *404 Not Found* if the target vanished meanwhile,
            *400 Bad Request* when the new session does not exist.
    """
    updated = Target(
        id=target.id,
        session_id=payload.session_id,
        ip=payload.ip,
        os=payload.os,
        hostname=payload.hostname,
        domain_name=payload.domain_name,
        computer_name=payload.computer_name,
        fqdn=payload.fqdn,
        os_guess=payload.os_guess,
        ports=_ports_from_payload(payload),
    )
    try:
        stored = store.update_target(updated)
    except TargetNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Target with id '{target.id}' not found.",
        )
    except SessionNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Session with id '{payload.session_id}' not found.",
        )
    return TargetResponse.model_validate(stored)


# ---------------------------------------------------------------------------
# DELETE /targets/{target_id}
# ---------------------------------------------------------------------------


@router.delete(
    "/{target_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a target",
)
async def delete_target(
    target: Target = Depends(validate_target_exists),
    store: AssessmentStore = Depends(get_store),
) -> None:
    """Remove a target from its session."""
    try:
        store.delete_target(target.id)
    except TargetNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Target with id '{target.id}' not found.",
        )
    logger.info("Target %s deleted.", target.id)


# ---------------------------------------------------------------------------
# POST /targets/{target_id}/scan
# ---------------------------------------------------------------------------


@router.post(
    "/{target_id}/scan",
    response_model=ScanUploadResponse,
    summary="Upload nmap output for a target",
)
async def upload_scan(
    payload: NmapOutput,
    target: Target = Depends(validate_target_exists),
    store: AssessmentStore = Depends(get_store),
) -> ScanUploadResponse:
    """Attach nmap results to a target.

    XML output (``-oX``) may describe several hosts.  The host whose
    address equals the target's address updates this target; if none
    does, the first host is used and its address replaces the target's.
    Every other host updates the session target with the same address,
    or becomes a new target when there is none, so repeated uploads of
    one scan do not duplicate hosts.

    Anything that is not XML is read as normal nmap output and only
    updates the ports of this target.

    Raises:
        HTTPException: *400 Bad Request* when the XML holds no live host
            with open ports, or the text holds no open port.  The stored
            target is left unchanged.
    """
    raw = payload.nmap_output or ""

    if not _looks_like_xml(raw):
        ports = parse_open_ports(raw)
        if not ports:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No open port found in the nmap output.",
            )
        stored = store.update_target(replace(target, ports=ports))
        logger.info("Target %s: %d open port(s) from text output.", stored.id, len(ports))
        return ScanUploadResponse(
            target_id=stored.id,
            ports_detected=len(ports),
            ports=_port_schemas(stored.ports),
            host_count=1,
            discovered_targets=[_host_response(stored)],
        )

    hosts = parse_hosts(raw)
    if not hosts:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No live host with open ports found in the nmap XML output.",
        )

    primary = next((host for host in hosts if host.ip_address == target.ip), hosts[0])
    stored = store.update_target(_apply_host(target, primary))
    discovered = [_host_response(stored)]

    known = {
        existing.ip: existing
        for existing in store.list_targets(stored.session_id)
        if existing.id != stored.id
    }
    created_count = 0
    for host in hosts:
        if host is primary:
            continue
        existing = known.get(host.ip_address)
        if existing is None:
            existing = store.create_target(stored.session_id, host.ip_address)
            created_count += 1
        updated = store.update_target(_apply_host(existing, host))
        known[updated.ip] = updated
        discovered.append(_host_response(updated))

    logger.info(
        "Scan upload for target %s: %d host(s), %d new target(s).",
        stored.id,
        len(hosts),
        created_count,
    )
    return ScanUploadResponse(
        target_id=stored.id,
        ports_detected=len(stored.ports),
        ports=_port_schemas(stored.ports),
        host_count=len(hosts),
        discovered_targets=discovered,
    )
