"""
Use Cases

1. Campaign setup: details, targeting, identity match, record creation
2. Script-lift configuration: target/comparison editing and save
"""

from .campaign_setup import (
    CampaignDetails,
    CampaignSetupUseCase,
    ReferenceLists,
    derive_status
)
from .lift_session import LiftConfigurationSession, PrescriptionRegenerator

__all__ = [
    "CampaignDetails",
    "CampaignSetupUseCase",
    "ReferenceLists",
    "derive_status",
    "LiftConfigurationSession",
    "PrescriptionRegenerator"
]
