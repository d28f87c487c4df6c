"""
Pydantic v2 schemas for the Recon2Report REST API.

Re-exports every public schema so consumers can do::

    from recon2report.api.schemas import SuggestRequest, TargetResponse  # etc.
"""

from recon2report.api.schemas.attack_path import (
    CommandResponse,
    ReferenceResponse,
    ServiceSummary,
    SuggestRequest,
    SuggestResponse,
    VectorResponse,
)
from recon2report.api.schemas.common import CamelModel, PortSchema
from recon2report.api.schemas.nmap import (
    HostResponse,
    NmapCommandResponse,
    NmapOutput,
    NmapSuggestRequest,
    ScanUploadResponse,
)
from recon2report.api.schemas.session import (
    SessionCreate,
    SessionResponse,
    TargetCreate,
    TargetResponse,
)

__all__: list[str] = [
    # common
    "CamelModel",
    "PortSchema",
    # session
    "SessionCreate",
    "SessionResponse",
    "TargetCreate",
    "TargetResponse",
    # nmap
    "NmapOutput",
    "HostResponse",
    "ScanUploadResponse",
    "NmapSuggestRequest",
    "NmapCommandResponse",
    # attack paths
    "SuggestRequest",
    "CommandResponse",
    "VectorResponse",
    "SuggestResponse",
    "ReferenceResponse",
    "ServiceSummary",
]
