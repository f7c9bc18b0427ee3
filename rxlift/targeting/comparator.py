"""
Audience Comparator

Compares a primary audience against a modified variant for what-if
exploration. The variant is always a deep copy of the primary plus
independent edits; every edit re-sizes the variant live.

Self-comparison (same id on both sides) is the normal what-if mode.
"""

from dataclasses import dataclass
from typing import Any, Callable, Sequence
import logging
import math
import random

from ..core.entities import Region, Specialty
from ..core.filters import FilterModel
from .audience import AudienceConfig, build_breakdown
from .sizer import AudienceSizer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetricDifference:
    """Difference of one metric between primary and secondary audiences."""
    label: str = ""
    primary: float = 0
    secondary: float = 0
    difference: float = 0
    percent_change: float = 0.0
    is_positive: bool = False


# Label -> extractor; extend to track more metrics
TRACKED_METRICS: list[tuple[str, Callable[[AudienceConfig], float]]] = [
    ("Provider Count", lambda audience: audience.provider_count),
    ("Potential Reach", lambda audience: audience.potential_reach),
]


def percent_change(difference: float, secondary: float) -> float:
    """difference / secondary x 100, or 0 when undefined."""
    if secondary == 0:
        return 0.0
    value = difference / secondary * 100
    return value if math.isfinite(value) else 0.0


class AudienceComparator:
    """Produces labeled metric deltas between two audiences."""

    def __init__(self, metrics: list[tuple[str, Callable[[AudienceConfig], float]]] = None):
        self._metrics = list(metrics or TRACKED_METRICS)

    def add_metric(self, label: str, extractor: Callable[[AudienceConfig], float]) -> None:
        """Track an additional metric."""
        self._metrics.append((label, extractor))

    def diff(self, primary: AudienceConfig, modified: AudienceConfig) -> list[MetricDifference]:
        results = []
        for label, extract in self._metrics:
            first = extract(primary)
            second = extract(modified)
            difference = first - second
            results.append(MetricDifference(
                label=label,
                primary=first,
                secondary=second,
                difference=difference,
                percent_change=percent_change(difference, second),
                is_positive=first > second
            ))
        return results


class ComparisonSession:
    """
    What-if editing session over a primary audience.

    The primary is copied on entry and never mutated; `modified` is owned
    by the session and discarded on reset. Filter edits re-size the
    modified audience and rebuild its segment breakdown from the given
    specialties and regions.
    """

    def __init__(
        self,
        primary: AudienceConfig,
        sizer: AudienceSizer = None,
        comparator: AudienceComparator = None,
        specialties: Sequence[Specialty] = (),
        regions: Sequence[Region] = (),
        rng: random.Random = None
    ):
        self._primary = primary.deep_copy()
        self._sizer = sizer or AudienceSizer()
        self._comparator = comparator or AudienceComparator()
        self._specialties = list(specialties)
        self._regions = list(regions)
        self._rng = rng or random.Random()
        self.modified = self._primary.deep_copy()

    @property
    def primary(self) -> AudienceConfig:
        return self._primary

    @property
    def is_self_comparison(self) -> bool:
        return self._primary.id == self.modified.id

    def update_filter(self, name: str, value: Any) -> AudienceConfig:
        """Edit one filter on the modified audience and re-size it."""
        filters = self.modified.filters.with_field(name, value)
        return self.apply_filters(filters)

    def apply_filters(self, filters: FilterModel) -> AudienceConfig:
        size = self._sizer.size(filters)
        breakdown = build_breakdown(
            filters, size.provider_count, self._specialties, self._regions, self._rng
        )
        self.modified = self.modified.model_copy(update={
            "filters": filters,
            "provider_count": size.provider_count,
            "potential_reach": size.potential_reach,
            "segments": breakdown.specialties,
            "region_data": breakdown.regions,
            "volume_segments": breakdown.volumes,
        })
        logger.debug(
            "Modified audience %s re-sized to %d providers",
            self.modified.id, size.provider_count
        )
        return self.modified

    def reset(self) -> AudienceConfig:
        """Discard all edits and restore a fresh copy of the primary."""
        self.modified = self._primary.deep_copy()
        return self.modified

    def differences(self) -> list[MetricDifference]:
        return self._comparator.diff(self._primary, self.modified)
