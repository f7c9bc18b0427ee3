"""
Default Script-Lift Configuration Generator

Builds a fresh ScriptLiftConfig the first time a campaign is configured.
Baselines are random, so pass a seeded random.Random for reproducible
output.
"""

from datetime import datetime
from typing import Optional, Sequence
import logging
import random

from ..config.settings import LiftConfig, get_settings
from ..core.entities import COMPETITOR_CATEGORY, Medication, Region, Specialty
from .models import (
    CampaignImpact,
    LiftPreferences,
    MedicationLiftEntry,
    ScriptLiftConfig,
    WeightedLabel
)

logger = logging.getLogger(__name__)

FALLBACK_CATEGORY = "general"

CATEGORY_BASELINE_RANGE = (200, 500)
COMPETITOR_BASELINE_RANGE = (300, 700)

WEIGHT_BUCKETS = [30, 25, 20, 15, 10]

DEFAULT_SPECIALTY_WEIGHTS = [
    ("spec1", "Primary Care"),
    ("spec2", "Cardiology"),
    ("spec3", "Neurology"),
    ("spec4", "Endocrinology"),
    ("spec5", "Other"),
]

DEFAULT_REGION_WEIGHTS = [
    ("reg1", "Northeast"),
    ("reg2", "Southeast"),
    ("reg3", "Midwest"),
    ("reg4", "Southwest"),
    ("reg5", "West"),
]


def resolve_target(
    medications: Sequence[Medication],
    target_medication_id: Optional[str] = None,
    target_category: Optional[str] = None
) -> Optional[Medication]:
    """Target by id if given, else the first medication in the category."""
    if target_medication_id:
        return next((m for m in medications if m.id == target_medication_id), None)
    if target_category:
        return next((m for m in medications if m.category == target_category), None)
    return None


def _weights(items, defaults) -> list[WeightedLabel]:
    if items is None:
        return [
            WeightedLabel(id=item_id, name=name, percentage=pct)
            for (item_id, name), pct in zip(defaults, WEIGHT_BUCKETS)
        ]
    return [
        WeightedLabel(id=item.id, name=item.name, percentage=pct)
        for item, pct in zip(items, WEIGHT_BUCKETS)
    ]


def generate_default(
    campaign_id: str,
    campaign_name: str,
    all_medications: Sequence[Medication],
    target_medication_id: Optional[str] = None,
    target_category: Optional[str] = None,
    specialties: Optional[Sequence[Specialty]] = None,
    regions: Optional[Sequence[Region]] = None,
    rng: random.Random = None,
    lift_config: LiftConfig = None,
    now: Optional[datetime] = None
) -> ScriptLiftConfig:
    """
    Build a default configuration for a campaign.

    Medications in the resolved category get a baseline in [200, 500) and
    a lift of 35 (target) or 15; medications in the competitors category
    get a baseline in [300, 700) and a lift of -8. An empty medication
    list yields a valid configuration with no medications.
    """
    rng = rng or random.Random()
    lift_config = lift_config or get_settings().lift
    now = now or datetime.now()

    target = resolve_target(all_medications, target_medication_id, target_category)
    category = target.category if target else (target_category or FALLBACK_CATEGORY)

    entries = []
    for med in all_medications:
        if med.category != category:
            continue
        is_target = target is not None and med.id == target.id
        entries.append(MedicationLiftEntry(
            id=med.id,
            name=med.name,
            category=med.category,
            baseline_prescriptions=rng.randrange(*CATEGORY_BASELINE_RANGE),
            lift_percentage=(
                lift_config.generated_target_lift if is_target
                else lift_config.generated_category_lift
            ),
            is_targeted=is_target
        ))

    if category != COMPETITOR_CATEGORY:
        for med in all_medications:
            if med.category != COMPETITOR_CATEGORY:
                continue
            entries.append(MedicationLiftEntry(
                id=med.id,
                name=med.name,
                category=med.category,
                baseline_prescriptions=rng.randrange(*COMPETITOR_BASELINE_RANGE),
                lift_percentage=lift_config.generated_competitor_lift,
                is_targeted=False,
                is_competitor=True
            ))

    if not entries:
        logger.info("No medications available for campaign %s lift configuration", campaign_id)

    return ScriptLiftConfig(
        campaign_id=campaign_id,
        campaign_name=campaign_name,
        medications=entries,
        specialties=_weights(specialties, DEFAULT_SPECIALTY_WEIGHTS),
        regions=_weights(regions, DEFAULT_REGION_WEIGHTS),
        campaign_impact=CampaignImpact(),
        created_at=now,
        last_modified=now,
        preferences=LiftPreferences()
    )
