"""
Audience Configuration and Segment Breakdown

An AudienceConfig is a named targeting specification together with its
derived size and a segment breakdown by specialty, region and prescribing
volume. Breakdowns of selected specialties/regions carry random variation
for display realism; pass a seeded random.Random for reproducible output.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence
from uuid import uuid4
import random

from pydantic import BaseModel, Field

from ..core.entities import Region, Specialty
from ..core.filters import FilterModel, VolumeTier
from .sizer import AudienceSizer

DEFAULT_REGION_DISTRIBUTION = [
    ("northeast", "Northeast", 25),
    ("southeast", "Southeast", 30),
    ("midwest", "Midwest", 20),
    ("southwest", "Southwest", 15),
    ("west", "West", 10),
]

DEFAULT_VOLUME_DISTRIBUTION = [
    ("high", "High Volume", 25),
    ("medium", "Medium Volume", 50),
    ("low", "Low Volume", 25),
]

# Top five specialties get 30%, 25%, 20%, 15%, 10%
DEFAULT_BUCKET_PERCENTAGES = [30, 25, 20, 15, 10]

REGION_VARIATION = (0.6, 1.4)
SPECIALTY_VARIATION = (0.7, 1.3)


class Segment(BaseModel):
    """A slice of an audience (specialty or volume tier)."""
    id: str
    name: str
    value: int = 0
    percentage: int = 0
    color: Optional[str] = None


class RegionDatum(BaseModel):
    """Provider count attributed to one region."""
    id: str
    name: str
    provider_count: int = 0
    percentage: int = 0


class AudienceConfig(BaseModel):
    """A named audience with its derived metrics."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = ""
    filters: FilterModel = Field(default_factory=FilterModel)
    provider_count: int = 0
    potential_reach: int = 0
    segments: list[Segment] = Field(default_factory=list)
    region_data: list[RegionDatum] = Field(default_factory=list)
    volume_segments: list[Segment] = Field(default_factory=list)
    date_created: datetime = Field(default_factory=datetime.now)

    def deep_copy(self) -> "AudienceConfig":
        """Independent copy; no mutable state is shared with the original."""
        return self.model_copy(deep=True)


@dataclass
class AudienceBreakdown:
    """Segment breakdown of a sized audience."""
    regions: list = field(default_factory=list)       # RegionDatum
    specialties: list = field(default_factory=list)   # Segment
    volumes: list = field(default_factory=list)       # Segment


def _percentage(part: int, total: int) -> int:
    if total <= 0:
        return 0
    return round(part / total * 100)


def _region_data(
    filters: FilterModel,
    provider_count: int,
    regions: Sequence[Region],
    rng: random.Random
) -> list[RegionDatum]:
    if filters.regions:
        by_id = {r.id: r for r in regions}
        selected = len(filters.regions)
        data = []
        for region_id in filters.regions:
            region = by_id.get(region_id)
            if region is None:
                continue
            multiplier = rng.uniform(*REGION_VARIATION)
            count = int(provider_count / selected * multiplier)
            data.append(RegionDatum(
                id=region_id,
                name=region.name,
                provider_count=count,
                percentage=_percentage(count, provider_count)
            ))
        return data

    return [
        RegionDatum(
            id=region_id,
            name=name,
            provider_count=provider_count * percent // 100,
            percentage=percent
        )
        for region_id, name, percent in DEFAULT_REGION_DISTRIBUTION
    ]


def _specialty_segments(
    filters: FilterModel,
    provider_count: int,
    specialties: Sequence[Specialty],
    rng: random.Random
) -> list[Segment]:
    if filters.specialties:
        by_id = {s.id: s for s in specialties}
        selected = len(filters.specialties)
        segments = []
        for specialty_id in filters.specialties:
            specialty = by_id.get(specialty_id)
            if specialty is None:
                continue
            multiplier = rng.uniform(*SPECIALTY_VARIATION)
            value = int(provider_count / selected * multiplier)
            segments.append(Segment(
                id=specialty_id,
                name=specialty.name,
                value=value,
                percentage=_percentage(value, provider_count)
            ))
        return segments

    return [
        Segment(
            id=specialty.id,
            name=specialty.name,
            value=provider_count * percent // 100,
            percentage=percent
        )
        for specialty, percent in zip(specialties, DEFAULT_BUCKET_PERCENTAGES)
    ]


def _volume_segments(filters: FilterModel, provider_count: int) -> list[Segment]:
    tier = filters.prescribing_volume
    if tier != VolumeTier.ALL:
        return [Segment(
            id=tier.value,
            name=f"{tier.value.capitalize()} Volume",
            value=provider_count,
            percentage=100
        )]

    return [
        Segment(
            id=tier_id,
            name=name,
            value=provider_count * percent // 100,
            percentage=percent
        )
        for tier_id, name, percent in DEFAULT_VOLUME_DISTRIBUTION
    ]


def build_breakdown(
    filters: FilterModel,
    provider_count: int,
    specialties: Sequence[Specialty] = (),
    regions: Sequence[Region] = (),
    rng: random.Random = None
) -> AudienceBreakdown:
    """Split a provider count into region, specialty and volume segments."""
    rng = rng or random.Random()
    return AudienceBreakdown(
        regions=_region_data(filters, provider_count, regions, rng),
        specialties=_specialty_segments(filters, provider_count, specialties, rng),
        volumes=_volume_segments(filters, provider_count)
    )


def build_audience(
    name: str,
    filters: FilterModel,
    specialties: Sequence[Specialty] = (),
    regions: Sequence[Region] = (),
    sizer: AudienceSizer = None,
    rng: random.Random = None
) -> AudienceConfig:
    """Size an audience and attach its segment breakdown."""
    sizer = sizer or AudienceSizer()
    size = sizer.size(filters)
    breakdown = build_breakdown(filters, size.provider_count, specialties, regions, rng)
    return AudienceConfig(
        name=name,
        filters=filters,
        provider_count=size.provider_count,
        potential_reach=size.potential_reach,
        segments=breakdown.specialties,
        region_data=breakdown.regions,
        volume_segments=breakdown.volumes
    )
