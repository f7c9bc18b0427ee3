"""
Script-Lift Projection

Components:
- Models: persisted per-campaign configuration (pydantic)
- Projector: target/comparison lift editing and volume totals
- Generator: first-time default configuration
- Analysis: deterministic, seed-derived lift figures for reporting
- Diagnostics: read-only checks of stored lift data
"""

from .models import (
    CampaignImpact,
    ComparisonMode,
    LiftPreferences,
    MedicationLiftEntry,
    ScriptLiftConfig,
    WeightedLabel,
    round_half_up
)
from .projector import (
    LiftProjector,
    LiftTotals,
    VolumeTotals,
    aggregate,
    comparison_entries,
    compute_totals,
    projected_volume
)
from .generator import generate_default, resolve_target
from .analysis import (
    ScriptLiftAnalysis,
    generate_campaign_lift,
    generate_category_lift,
    generate_medication_lift,
    is_medication_targeted
)
from .diagnostics import (
    DiagnosticReport,
    DiagnosticRun,
    DiagnosticSummary,
    diagnose_all,
    diagnose_campaign
)

__all__ = [
    "CampaignImpact",
    "ComparisonMode",
    "LiftPreferences",
    "MedicationLiftEntry",
    "ScriptLiftConfig",
    "WeightedLabel",
    "round_half_up",
    "LiftProjector",
    "LiftTotals",
    "VolumeTotals",
    "aggregate",
    "comparison_entries",
    "compute_totals",
    "projected_volume",
    "generate_default",
    "resolve_target",
    "ScriptLiftAnalysis",
    "generate_campaign_lift",
    "generate_category_lift",
    "generate_medication_lift",
    "is_medication_targeted",
    "DiagnosticReport",
    "DiagnosticRun",
    "DiagnosticSummary",
    "diagnose_all",
    "diagnose_campaign"
]
