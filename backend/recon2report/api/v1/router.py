"""
Aggregated APIRouter for API version 1.

All v1 endpoint routers are included here and exposed as a single ``router``
instance that is mounted by the FastAPI application in
``recon2report.main``.  The prefix ``/api/v1`` is applied by the
application, so sub-routers only declare their own resource prefix
(e.g. ``/sessions``, ``/attack-paths``).
"""

from __future__ import annotations

from fastapi import APIRouter

from recon2report.api.v1 import attack_paths, nmap, sessions, targets

router = APIRouter()

router.include_router(
    sessions.router,
    prefix="/sessions",
    tags=["sessions"],
)
router.include_router(
    targets.router,
    prefix="/targets",
    tags=["targets"],
)
router.include_router(
    nmap.router,
    prefix="/nmap",
    tags=["nmap"],
)
router.include_router(
    attack_paths.router,
    prefix="/attack-paths",
    tags=["attack-paths"],
)
