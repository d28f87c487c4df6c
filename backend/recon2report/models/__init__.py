"""
Recon2Report domain models package.

Re-exports every model class so that consumers can import directly from
``recon2report.models`` instead of reaching into individual submodules::

    from recon2report.models import AssessmentState, ServiceRuleSet, HostScanRecord
"""

from recon2report.models.rules import AttackVector, Command, Outcome, ServiceRuleSet
from recon2report.models.scan import HostScanRecord, OpenPort
from recon2report.models.state import AssessmentState
from recon2report.models.session import Session, Target

__all__: list[str] = [
    "AttackVector",
    "Command",
    "Outcome",
    "ServiceRuleSet",
    "HostScanRecord",
    "OpenPort",
    "AssessmentState",
    "Session",
    "Target",
]
