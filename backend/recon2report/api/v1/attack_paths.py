"""
Attack-path suggestion endpoints.

``POST /suggest`` evaluates the caller's engagement state against the rule
corpus and returns the applicable vectors with ready-to-run commands.
``GET /all`` is the reference view: every vector of a phase with raw
command syntax, regardless of scan results.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from recon2report.api.deps import get_rule_engine, get_store
from recon2report.api.schemas.attack_path import (
    ReferenceResponse,
    ServiceSummary,
    SuggestRequest,
    SuggestResponse,
    VectorResponse,
)
from recon2report.engine.evaluation import RuleEngine
from recon2report.engine.phases import normalize_phase
from recon2report.engine.templating import RenderContext
from recon2report.models.state import AssessmentState
from recon2report.store.base import AssessmentStore

logger = logging.getLogger(__name__)

router = APIRouter()


def _resolve_ip_range(payload: SuggestRequest, store: AssessmentStore) -> Optional[str]:
    """Use the request's range, else the range recorded on its session."""
    if payload.ip_range:
        return payload.ip_range
    if payload.session_id:
        session = store.get_session(payload.session_id)
        if session is not None:
            return session.ip_range
    return None


@router.post(
    "/suggest",
    response_model=SuggestResponse,
    summary="Suggest applicable attack vectors",
)
async def suggest_attack_paths(
    payload: SuggestRequest,
    engine: RuleEngine = Depends(get_rule_engine),
    store: AssessmentStore = Depends(get_store),
) -> SuggestResponse:
    """Evaluate the engagement state and render the matching commands.

    The phase is normalised (``"no_creds"`` becomes ``"reconnaissance"``),
    prerequisites are OR-ed, and unknown target OS values do not filter
    anything out.  Placeholders without a value stay in ``readyCommand``.
    """
    state = AssessmentState.build(
        current_phase=payload.current_phase,
        acquired_items=payload.acquired_items,
        open_ports=payload.open_ports,
        services=payload.services,
        target_os=payload.target_os,
    )
    context = RenderContext(
        ip=payload.target_ip,
        domain=payload.domain_name,
        ip_range=_resolve_ip_range(payload, store),
        open_ports=tuple(payload.open_ports),
    )
    applicable = engine.evaluate(state)
    phase = normalize_phase(payload.current_phase)

    logger.info(
        "Suggested %d vector(s) for phase %s (target %s).",
        len(applicable),
        phase.value,
        payload.target_ip or "-",
    )
    return SuggestResponse(
        phase=phase.value,
        applicable_vectors=[VectorResponse.from_applicable(item, context) for item in applicable],
    )


@router.get(
    "/all",
    response_model=ReferenceResponse,
    summary="List every vector of a phase",
)
async def list_phase_vectors(
    phase: Optional[str] = Query(
        None,
        description="Phase name or alias.  Defaults to reconnaissance.",
    ),
    engine: RuleEngine = Depends(get_rule_engine),
) -> ReferenceResponse:
    """Return the reference view for *phase*, raw syntax only."""
    canonical = normalize_phase(phase)
    return ReferenceResponse(
        phase=canonical.value,
        vectors=[VectorResponse.from_applicable(item) for item in engine.vectors_for_phase(phase)],
    )


@router.get(
    "/services",
    response_model=list[ServiceSummary],
    summary="List loaded rule sets",
)
async def list_rule_services(
    engine: RuleEngine = Depends(get_rule_engine),
) -> list[ServiceSummary]:
    """Summarise the loaded corpus without its vectors."""
    return [
        ServiceSummary(
            service=rule_set.service,
            description=rule_set.description,
            ports=list(rule_set.ports),
            service_names=list(rule_set.service_names),
            target_os=list(rule_set.target_os),
            vector_count=len(rule_set.vectors),
        )
        for rule_set in engine.services
    ]
