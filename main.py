#!/usr/bin/env python3
"""
Rx Lift Engine - Main Demo

Walks one campaign through the engine end to end:
1. Audience sizing and segment breakdown
2. What-if audience comparison
3. Identity match simulation (fake clock)
4. Campaign creation
5. Script-lift configuration, totals and deterministic analysis
"""

from datetime import date, timedelta
import random

from rxlift.config import configure_logging, get_settings
from rxlift.core import FilterModel, Medication, Region, Specialty, VolumeTier
from rxlift.lift import ComparisonMode, diagnose_all, generate_campaign_lift
from rxlift.simulation import IdentityMatchSimulator, ManualScheduler
from rxlift.stores import InMemoryCampaignStore, InMemoryReferenceData, create_script_lift_store
from rxlift.targeting import ComparisonSession
from rxlift.use_cases import CampaignDetails, CampaignSetupUseCase, LiftConfigurationSession

MEDICATIONS = [
    Medication(id="med-a", name="Cardiolex", category="cardiovascular"),
    Medication(id="med-b", name="Vasotrin", category="cardiovascular"),
    Medication(id="med-c", name="Lipidrop", category="cardiovascular"),
    Medication(id="med-d", name="Glucobal", category="diabetes"),
    Medication(id="comp-1", name="Rivalix", category="competitors"),
    Medication(id="comp-2", name="Contrava", category="competitors"),
]

SPECIALTIES = [
    Specialty(id="spec-cardio", name="Cardiology"),
    Specialty(id="spec-pc", name="Primary Care"),
    Specialty(id="spec-endo", name="Endocrinology"),
]

REGIONS = [
    Region(id="reg-ne", name="Northeast", type="territory"),
    Region(id="reg-mw", name="Midwest", type="territory"),
]


def print_totals(label, totals):
    print(f"  {label:<12} {totals.baseline:>10.0f} {totals.projected:>10.0f} "
          f"{totals.change:>+8.0f} {totals.percent_change:>+8.1f}%")


def main():
    """Main entry point."""
    settings = get_settings()
    configure_logging(settings)
    rng = random.Random(42)

    print()
    print("=" * 60)
    print(f"{settings.app_name.upper()} - DEMONSTRATION")
    print("=" * 60)
    print()

    reference = InMemoryReferenceData(MEDICATIONS, SPECIALTIES, REGIONS)
    campaigns = InMemoryCampaignStore()
    scheduler = ManualScheduler()
    simulator = IdentityMatchSimulator(scheduler, settings.match)
    setup = CampaignSetupUseCase(reference, campaigns, simulator, rng=rng)

    # 1. Targeting
    filters = FilterModel(
        medication_category="cardiovascular",
        medications=("med-a",),
        excluded_medications=("comp-1",),
        specialties=("spec-cardio", "spec-pc"),
        regions=("reg-ne",),
        prescribing_volume=VolumeTier.HIGH
    )
    audience = setup.build_audience("Cardiolex launch", filters)

    print("Audience Sizing")
    print("-" * 40)
    print(f"  Providers:       {audience.provider_count:,}")
    print(f"  Potential reach: {audience.potential_reach:,}")
    for segment in audience.segments:
        print(f"    {segment.name:<20} {segment.value:>6} ({segment.percentage}%)")
    print()

    # 2. What-if comparison
    session = ComparisonSession(audience, specialties=SPECIALTIES, regions=REGIONS, rng=rng)
    session.update_filter("prescribing_volume", VolumeTier.ALL)

    print("What-if: all prescribing volumes")
    print("-" * 40)
    print(f"  {'Metric':<18} {'Primary':>10} {'Modified':>10} {'Change':>9}")
    for diff in session.differences():
        print(f"  {diff.label:<18} {diff.primary:>10,.0f} {diff.secondary:>10,.0f} "
              f"{diff.percent_change:>+8.1f}%")
    for segment in session.modified.volume_segments:
        print(f"    {segment.name:<20} {segment.value:>6} ({segment.percentage}%)")
    print()

    # 3. Identity match
    print("Identity Match")
    print("-" * 40)
    simulator.subscribe(lambda s: print(f"  [{s.progress:>3}%] {s.stage.value:<10} {s.current_operation}"))
    setup.start_identity_match(audience)
    scheduler.run_until_idle()
    result = setup.require_identity_match_complete()
    print(f"  Matched {result.matched_providers:,} of {result.total_providers:,} "
          f"({result.match_percentage}%)")
    print()

    # 4. Campaign record
    today = date.today()
    campaign = setup.create_campaign(
        CampaignDetails(
            name="Cardiolex Q3 Launch",
            start_date=today,
            end_date=today + timedelta(days=90)
        ),
        filters
    )
    print(f"Campaign created: {campaign.name} [{campaign.status.value}]")
    print()

    # 5. Script lift
    store = create_script_lift_store(settings)
    regenerated = []
    lift = LiftConfigurationSession(store, reference, regenerator=regenerated.append, rng=rng)
    lift.open(campaign)
    lift.set_target("med-a")
    lift.set_comparison(ComparisonMode.SPECIFIC_IDS, ["med-b", "comp-2"])
    saved = lift.save()

    print("Script Lift Configuration")
    print("-" * 40)
    print(f"  {'Medication':<12} {'Baseline':>10} {'Lift %':>8}")
    for entry in saved.medications:
        marker = "*" if entry.is_targeted else " "
        print(f" {marker}{entry.name:<12} {entry.baseline_prescriptions:>10.0f} {entry.lift_percentage:>+8.1f}")
    print()
    totals = lift.totals()
    print(f"  {'':<12} {'Baseline':>10} {'Projected':>10} {'Change':>8} {'Pct':>9}")
    print_totals("Target", totals.target)
    print_totals("Comparison", totals.comparison)
    print()

    print("Deterministic Lift Analysis")
    print("-" * 40)
    for category, analyses in generate_campaign_lift(MEDICATIONS, campaign).items():
        print(f"  {category}")
        for analysis in analyses:
            print(f"    {analysis.medication_name:<12} {analysis.baseline:>5} -> {analysis.projected:<5} "
                  f"{analysis.lift_percentage:>+6.1f}% (confidence {analysis.confidence_score})")
    print()

    run = diagnose_all(campaigns, store, lambda campaign_id: campaign_id in regenerated)
    print("Diagnostics")
    print("-" * 40)
    print(f"  Campaigns:              {run.summary.total_campaigns}")
    print(f"  With config:            {run.summary.with_config}")
    print(f"  With prescription data: {run.summary.with_prescription_data}")
    print()


if __name__ == "__main__":
    main()
