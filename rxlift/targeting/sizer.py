"""
Audience Sizer

Maps a FilterModel to a provider-count and patient-reach estimate through
a cascade of multipliers applied to a fixed base. The count is floored
after every step, so the order of the steps is part of the contract:

1. medications (included ids, else category)
2. specialties
3. regions
4. prescribing-volume tier
5. exclusion penalty

Multipliers are deterministic heuristics, not a fitted model. Factors and
products are plain floats, so counts land exactly where double-precision
reference figures do (one region on 4500 gives 2024, not 2025).
"""

from dataclasses import dataclass
import logging
import math

from ..config.settings import SizingConfig, get_settings
from ..core.filters import FilterModel, VolumeTier

logger = logging.getLogger(__name__)

INCLUDED_MEDICATIONS_FACTOR = 0.7
CATEGORY_FACTOR = 0.85

SPECIALTY_BASE = 0.4
SPECIALTY_STEP = 0.1

REGION_BASE = 0.3
REGION_STEP = 0.15

VOLUME_FACTORS = {
    VolumeTier.HIGH: 0.3,
    VolumeTier.MEDIUM: 0.5,
    VolumeTier.LOW: 0.7,
    VolumeTier.ALL: 1.0,
}

EXCLUSION_BASE = 0.7
EXCLUSION_STEP = 0.05


@dataclass(frozen=True)
class AudienceSizeResult:
    """Derived audience size; recomputed on every filter change."""
    provider_count: int = 0
    potential_reach: int = 0


def _apply(count: int, factor: float) -> int:
    """Multiply and floor, never below zero."""
    if factor <= 0:
        return 0
    return math.floor(count * factor)


def exclusion_factor(excluded: int) -> float:
    """Penalty for excluded medications, clamped at zero for large sets."""
    return max(0.0, EXCLUSION_BASE - EXCLUSION_STEP * excluded)


class AudienceSizer:
    """
    Pure audience-size estimator.

    Holds only configuration; `size` has no side effects and never fails.
    """

    def __init__(self, config: SizingConfig = None):
        self.config = config or get_settings().sizing

    def size(self, filters: FilterModel) -> AudienceSizeResult:
        count = self.config.base_provider_count

        if not filters.is_unset():
            if filters.medications:
                count = _apply(count, INCLUDED_MEDICATIONS_FACTOR)
            elif filters.medication_category:
                count = _apply(count, CATEGORY_FACTOR)

            if filters.specialties:
                count = _apply(count, SPECIALTY_BASE + SPECIALTY_STEP * len(filters.specialties))

            if filters.regions:
                count = _apply(count, REGION_BASE + REGION_STEP * len(filters.regions))

            count = _apply(count, VOLUME_FACTORS[filters.prescribing_volume])

            if filters.excluded_medications:
                count = _apply(count, exclusion_factor(len(filters.excluded_medications)))

        result = AudienceSizeResult(
            provider_count=count,
            potential_reach=count * self.config.reach_per_provider
        )
        logger.debug(
            "Sized audience: %d providers, %d potential reach",
            result.provider_count, result.potential_reach
        )
        return result


def size_audience(filters: FilterModel, config: SizingConfig = None) -> AudienceSizeResult:
    """Convenience wrapper around AudienceSizer.size."""
    return AudienceSizer(config).size(filters)
