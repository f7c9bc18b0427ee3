"""
Core domain models: reference data, campaign records, targeting filters
and the error taxonomy shared by every component.
"""

from .entities import (
    COMPETITOR_CATEGORY,
    Campaign,
    CampaignStatus,
    Medication,
    Region,
    Specialty
)
from .errors import CollaboratorError, RxLiftError, TargetingValidationError
from .filters import FilterModel, Timeframe, VolumeTier

__all__ = [
    "COMPETITOR_CATEGORY",
    "Campaign",
    "CampaignStatus",
    "Medication",
    "Region",
    "Specialty",
    "CollaboratorError",
    "RxLiftError",
    "TargetingValidationError",
    "FilterModel",
    "Timeframe",
    "VolumeTier"
]
