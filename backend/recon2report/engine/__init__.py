"""Recon2Report rule engine: phase taxonomy, evaluation and command templating."""

from recon2report.engine.evaluation import (
    ApplicableVector,
    RuleEngine,
    evaluate,
    vectors_for_phase,
)
from recon2report.engine.nmap_commands import NmapCommand, build_nmap_commands
from recon2report.engine.phases import Phase, normalize_phase, vector_phase
from recon2report.engine.templating import (
    RenderContext,
    RenderedCommand,
    render,
    render_command,
)

__all__ = [
    "ApplicableVector",
    "RuleEngine",
    "evaluate",
    "vectors_for_phase",
    "NmapCommand",
    "build_nmap_commands",
    "Phase",
    "normalize_phase",
    "vector_phase",
    "RenderContext",
    "RenderedCommand",
    "render",
    "render_command",
]
