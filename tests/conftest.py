"""
Shared test fixtures for the rxlift test suite.

Provides reusable fixtures for:
- Reference data (medications, specialties, regions)
- Seeded random sources
- Fake-clock scheduler and identity match simulator
- Default configuration objects
"""

import random
from datetime import date, datetime

import pytest

from rxlift.config import LiftConfig, MatchConfig, SizingConfig
from rxlift.core import Campaign, CampaignStatus, Medication, Region, Specialty
from rxlift.lift import MedicationLiftEntry, ScriptLiftConfig
from rxlift.simulation import IdentityMatchSimulator, ManualScheduler
from rxlift.stores import InMemoryCampaignStore, InMemoryReferenceData


# ============================================================================
# STANDARD DATES
# ============================================================================

@pytest.fixture
def today() -> date:
    """Fixed 'today' for status derivation."""
    return date(2026, 3, 15)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 15, 9, 30)


# ============================================================================
# CONFIGURATION
# ============================================================================

@pytest.fixture
def sizing_config() -> SizingConfig:
    return SizingConfig(base_provider_count=4500, reach_per_provider=250)


@pytest.fixture
def match_config() -> MatchConfig:
    return MatchConfig(
        parsing_seconds=2.0,
        matching_seconds=2.5,
        analyzing_seconds=2.5,
        hold_seconds=1.0,
        success_rate=0.98
    )


@pytest.fixture
def lift_config() -> LiftConfig:
    return LiftConfig(
        target_lift=25.0,
        comparison_lift=-5.0,
        generated_target_lift=35.0,
        generated_category_lift=15.0,
        generated_competitor_lift=-8.0
    )


# ============================================================================
# REFERENCE DATA
# ============================================================================

@pytest.fixture
def medications() -> list[Medication]:
    """Three cardiovascular products, one diabetes product, two competitors."""
    return [
        Medication(id="med-a", name="Cardiolex", category="cardiovascular"),
        Medication(id="med-b", name="Vasotrin", category="cardiovascular"),
        Medication(id="med-c", name="Lipidrop", category="cardiovascular"),
        Medication(id="med-d", name="Glucobal", category="diabetes"),
        Medication(id="comp-1", name="Rivalix", category="competitors"),
        Medication(id="comp-2", name="Contrava", category="competitors"),
    ]


@pytest.fixture
def specialties() -> list[Specialty]:
    return [
        Specialty(id="spec-cardio", name="Cardiology"),
        Specialty(id="spec-pc", name="Primary Care"),
        Specialty(id="spec-endo", name="Endocrinology"),
    ]


@pytest.fixture
def regions() -> list[Region]:
    return [
        Region(id="reg-ne", name="Northeast", type="territory"),
        Region(id="reg-mw", name="Midwest", type="territory"),
    ]


@pytest.fixture
def reference_data(medications, specialties, regions) -> InMemoryReferenceData:
    return InMemoryReferenceData(medications, specialties, regions)


@pytest.fixture
def campaign_store() -> InMemoryCampaignStore:
    return InMemoryCampaignStore()


# ============================================================================
# RANDOMNESS AND TIME
# ============================================================================

@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible breakdowns and baselines."""
    return random.Random(1234)


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def simulator(scheduler, match_config) -> IdentityMatchSimulator:
    return IdentityMatchSimulator(scheduler, match_config)


# ============================================================================
# CAMPAIGNS AND LIFT CONFIGS
# ============================================================================

@pytest.fixture
def campaign() -> Campaign:
    return Campaign(
        id="camp-1",
        name="Cardiolex Launch",
        status=CampaignStatus.DRAFT,
        target_medication_id="med-a",
        targeting_metadata={"medication_category": "cardiovascular"},
        start_date=date(2026, 3, 1),
        end_date=date(2026, 5, 31)
    )


@pytest.fixture
def lift_table() -> ScriptLiftConfig:
    """
    Hand-built configuration with no target set.

    med-a 300, med-b 1000, med-c 500 (cardiovascular); comp-1 400.
    """
    return ScriptLiftConfig(
        campaign_id="camp-1",
        campaign_name="Cardiolex Launch",
        medications=[
            MedicationLiftEntry(id="med-a", name="Cardiolex", category="cardiovascular",
                                baseline_prescriptions=300),
            MedicationLiftEntry(id="med-b", name="Vasotrin", category="cardiovascular",
                                baseline_prescriptions=1000),
            MedicationLiftEntry(id="med-c", name="Lipidrop", category="cardiovascular",
                                baseline_prescriptions=500),
            MedicationLiftEntry(id="comp-1", name="Rivalix", category="competitors",
                                baseline_prescriptions=400, is_competitor=True),
        ]
    )
