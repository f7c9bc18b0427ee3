"""
Targeting

Turns filter selections into audience estimates:
- AudienceSizer: multiplicative sizing cascade
- Segment breakdowns by region, specialty and volume tier
- AudienceComparator: what-if deltas against a primary audience
"""

from .sizer import AudienceSizer, AudienceSizeResult, size_audience
from .audience import (
    AudienceBreakdown,
    AudienceConfig,
    RegionDatum,
    Segment,
    build_audience,
    build_breakdown
)
from .comparator import (
    AudienceComparator,
    ComparisonSession,
    MetricDifference,
    percent_change
)

__all__ = [
    "AudienceSizer",
    "AudienceSizeResult",
    "size_audience",
    "AudienceBreakdown",
    "AudienceConfig",
    "RegionDatum",
    "Segment",
    "build_audience",
    "build_breakdown",
    "AudienceComparator",
    "ComparisonSession",
    "MetricDifference",
    "percent_change"
]
