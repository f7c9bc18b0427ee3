"""
Integration tests for rxlift/use_cases

Tests the campaign setup wizard and the lift configuration session
against in-memory collaborators:
- Step validation
- Collaborator failures surfaced as CollaboratorError
- Campaign creation after identity matching
- Status derivation from schedule
- Load-or-generate, save and best-effort regeneration
"""

from dataclasses import replace
from datetime import date, timedelta

import pytest

from rxlift.core import (
    Campaign,
    CampaignStatus,
    CollaboratorError,
    FilterModel,
    TargetingValidationError
)
from rxlift.lift import ComparisonMode
from rxlift.stores import InMemoryCampaignStore, InMemoryReferenceData, InMemoryScriptLiftStore
from rxlift.targeting import AudienceSizer
from rxlift.use_cases import (
    CampaignDetails,
    CampaignSetupUseCase,
    LiftConfigurationSession,
    derive_status
)


class FailingReferenceData(InMemoryReferenceData):

    def medications(self):
        raise ConnectionError("catalogue unavailable")


class FailingCampaignStore(InMemoryCampaignStore):

    def create(self, campaign):
        raise ConnectionError("insert rejected")


class FailingScriptLiftStore(InMemoryScriptLiftStore):

    def _write(self, config):
        raise OSError("disk full")


@pytest.fixture
def wizard(reference_data, campaign_store, simulator, sizing_config, rng) -> CampaignSetupUseCase:
    return CampaignSetupUseCase(
        reference_data, campaign_store, simulator, AudienceSizer(sizing_config), rng
    )


@pytest.fixture
def details() -> CampaignDetails:
    return CampaignDetails(
        name="Cardiolex Launch",
        start_date=date(2026, 4, 1),
        end_date=date(2026, 6, 30)
    )


@pytest.fixture
def filters() -> FilterModel:
    return FilterModel(
        medication_category="cardiovascular",
        medications=("med-a",),
        specialties=("spec-cardio",),
        regions=("reg-ne",)
    )


# ============================================================================
# CAMPAIGN SETUP
# ============================================================================

class TestValidation:

    def test_valid_details(self, wizard, details):
        wizard.validate_details(details)

    def test_same_day_schedule_allowed(self, wizard):
        day = date(2026, 4, 1)
        wizard.validate_details(CampaignDetails(name="One day", start_date=day, end_date=day))

    @pytest.mark.parametrize("update,field", [
        ({"name": "  "}, "name"),
        ({"start_date": None}, "start_date"),
        ({"end_date": None}, "end_date"),
        ({"end_date": date(2026, 3, 1)}, "end_date"),
    ])
    def test_invalid_details(self, wizard, details, update, field):
        with pytest.raises(TargetingValidationError) as exc_info:
            wizard.validate_details(replace(details, **update))
        assert exc_info.value.field == field

    def test_targeting_requires_category_or_medication(self, wizard):
        with pytest.raises(TargetingValidationError, match="medication category"):
            wizard.validate_targeting(FilterModel(specialties=("spec-cardio",)))

    def test_targeting_rejects_overlap(self, wizard):
        filters = FilterModel(medications=("med-a",), excluded_medications=("med-a",))
        with pytest.raises(TargetingValidationError, match="both included and excluded"):
            wizard.validate_targeting(filters)


class TestAudienceStep:

    def test_builds_sized_audience(self, wizard, filters):
        audience = wizard.build_audience("Launch", filters)
        # floor(floor(floor(4500 * 0.70) * 0.50) * 0.45)
        assert audience.provider_count == 708
        assert [s.id for s in audience.segments] == ["spec-cardio"]

    def test_reference_failure_wrapped(self, campaign_store, simulator, filters):
        use_case = CampaignSetupUseCase(FailingReferenceData(), campaign_store, simulator)
        with pytest.raises(CollaboratorError, match="catalogue unavailable") as exc_info:
            use_case.build_audience("Launch", filters)

        assert exc_info.value.collaborator == "reference_data"
        assert isinstance(exc_info.value.__cause__, ConnectionError)


class TestCreateCampaign:

    def run_match(self, wizard, filters, scheduler):
        wizard.start_identity_match(wizard.build_audience("Launch", filters))
        scheduler.run_until_idle()

    def test_requires_identity_match(self, wizard, details, filters):
        with pytest.raises(TargetingValidationError, match="Identity matching"):
            wizard.create_campaign(details, filters)

    def test_creates_draft_with_targeting(self, wizard, details, filters, scheduler, campaign_store):
        self.run_match(wizard, filters, scheduler)
        campaign = wizard.create_campaign(details, filters)

        assert campaign.status == CampaignStatus.DRAFT
        assert campaign.target_medication_id == "med-a"
        assert campaign.target_specialty == "spec-cardio"
        assert campaign.target_geographic_area == "reg-ne"
        assert campaign.medication_category == "cardiovascular"
        assert campaign.targeting_metadata["matched_providers"] == 693
        assert campaign_store.fetch_by_id(campaign.id) == campaign

    def test_store_failure_wrapped(self, reference_data, simulator, scheduler, details, filters):
        use_case = CampaignSetupUseCase(reference_data, FailingCampaignStore(), simulator)
        self.run_match(use_case, filters, scheduler)

        with pytest.raises(CollaboratorError, match="insert rejected") as exc_info:
            use_case.create_campaign(details, filters)
        assert exc_info.value.collaborator == "campaign_store"


class TestDeriveStatus:

    def campaign(self, status=CampaignStatus.PENDING, start=None, end=None):
        return Campaign(status=status, start_date=start, end_date=end)

    def test_draft_preserved(self, today):
        draft = self.campaign(CampaignStatus.DRAFT, today - timedelta(days=5), today + timedelta(days=5))
        assert derive_status(draft, today) == CampaignStatus.DRAFT

    def test_within_range_is_active(self, today):
        c = self.campaign(start=today - timedelta(days=1), end=today + timedelta(days=1))
        assert derive_status(c, today) == CampaignStatus.ACTIVE

    def test_range_is_inclusive(self, today):
        assert derive_status(self.campaign(start=today, end=today), today) == CampaignStatus.ACTIVE

    def test_after_end_is_completed(self, today):
        c = self.campaign(start=today - timedelta(days=30), end=today - timedelta(days=1))
        assert derive_status(c, today) == CampaignStatus.COMPLETED

    def test_before_start_keeps_status(self, today):
        c = self.campaign(start=today + timedelta(days=1), end=today + timedelta(days=30))
        assert derive_status(c, today) == CampaignStatus.PENDING

    def test_open_ended(self, today):
        assert derive_status(self.campaign(start=today), today) == CampaignStatus.ACTIVE
        assert derive_status(self.campaign(start=today + timedelta(days=1)), today) == CampaignStatus.PENDING

    def test_end_only(self, today):
        assert derive_status(self.campaign(end=today), today) == CampaignStatus.ACTIVE
        assert derive_status(self.campaign(end=today - timedelta(days=1)), today) == CampaignStatus.COMPLETED

    def test_no_dates(self, today):
        assert derive_status(self.campaign(CampaignStatus.PAUSED), today) == CampaignStatus.PAUSED

    def test_refresh_status_writes_back(self, wizard, campaign_store, today):
        campaign_store.create(Campaign(id="c1", name="Launch", status=CampaignStatus.PENDING, start_date=today))
        updated = wizard.refresh_status("c1", today)
        assert updated.status == CampaignStatus.ACTIVE
        assert updated.name == "Launch"
        assert updated.start_date == today
        assert campaign_store.fetch_by_id("c1").status == CampaignStatus.ACTIVE

    def test_refresh_unknown_campaign(self, wizard):
        with pytest.raises(CollaboratorError):
            wizard.refresh_status("ghost")


# ============================================================================
# LIFT CONFIGURATION SESSION
# ============================================================================

@pytest.fixture
def session(reference_data, lift_config, rng) -> LiftConfigurationSession:
    return LiftConfigurationSession(
        InMemoryScriptLiftStore(), reference_data, lift_config=lift_config, rng=rng
    )


class TestLiftSession:

    def test_requires_open(self, session):
        with pytest.raises(RuntimeError, match="No lift configuration"):
            session.totals()

    def test_generates_default_when_missing(self, session, campaign):
        config = session.open(campaign)
        assert config.campaign_id == "camp-1"
        assert config.target().id == "med-a"
        assert session.store.get("camp-1") is None

    def test_loads_stored_config(self, session, campaign, lift_table):
        session.store.put(lift_table.model_copy(update={"notes": "stored"}))
        assert session.open(campaign).notes == "stored"

    def test_edit_and_save(self, session, campaign, lift_table):
        session.store.put(lift_table)
        session.open(campaign)
        session.set_target("med-a")
        session.set_comparison(ComparisonMode.SPECIFIC_IDS, ["med-b"])
        session.set_notes("wave 1")

        totals = session.totals()
        assert totals.target.projected == 375
        assert totals.comparison.projected == 950

        saved = session.save()
        stored = session.store.get("camp-1")
        assert stored == saved
        assert stored.preferences.selected_medication_ids == ["med-b"]

    def test_save_takes_overall_lift_from_target(self, session, campaign, lift_table):
        session.store.put(lift_table)
        session.open(campaign)
        session.set_target("med-a")

        saved = session.save()
        assert saved.campaign_impact.overall_lift_percentage == 25.0
        assert session.store.get("camp-1").campaign_impact.overall_lift_percentage == 25.0

    def test_save_without_target_zeroes_overall_lift(self, session, campaign, lift_table):
        session.store.put(lift_table)
        session.open(campaign)

        saved = session.save()
        assert saved.campaign_impact.overall_lift_percentage == 0.0
        assert saved.campaign_impact.estimated_roi == 165.0

    def test_regenerator_called_after_save(self, reference_data, lift_config, campaign):
        calls = []
        session = LiftConfigurationSession(
            InMemoryScriptLiftStore(), reference_data, regenerator=calls.append, lift_config=lift_config
        )
        session.open(campaign)
        session.save()
        assert calls == ["camp-1"]

    def test_regenerator_failure_swallowed(self, reference_data, lift_config, campaign):
        def regenerate(campaign_id):
            raise RuntimeError("prescription service down")

        session = LiftConfigurationSession(
            InMemoryScriptLiftStore(), reference_data, regenerator=regenerate, lift_config=lift_config
        )
        session.open(campaign)
        saved = session.save()

        assert session.store.get("camp-1") == saved

    def test_store_failure_wrapped(self, reference_data, lift_config, campaign):
        calls = []
        session = LiftConfigurationSession(
            FailingScriptLiftStore(), reference_data, regenerator=calls.append, lift_config=lift_config
        )
        session.open(campaign)
        with pytest.raises(CollaboratorError, match="disk full") as exc_info:
            session.save()

        assert exc_info.value.collaborator == "script_lift_store"
        assert calls == []

    def test_reference_failure_on_generate(self, lift_config, campaign):
        session = LiftConfigurationSession(
            InMemoryScriptLiftStore(), FailingReferenceData(), lift_config=lift_config
        )
        with pytest.raises(CollaboratorError, match="catalogue unavailable"):
            session.open(campaign)
