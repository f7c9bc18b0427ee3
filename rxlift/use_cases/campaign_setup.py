"""
Use Case: Campaign Setup Wizard

Walks a new campaign from details, through targeting and identity
matching, to a stored campaign record:

1. Details: name and schedule
2. Targeting: filters sized into an audience
3. Identity match: staged resolution of the sized provider count
4. Create: campaign record with targeting fields written

Validation failures block a step and leave state untouched. Failures of
the reference-data provider or the record store surface as
CollaboratorError with the underlying message.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional
import logging
import random

from ..core.entities import Campaign, CampaignStatus
from ..core.errors import CollaboratorError, TargetingValidationError
from ..core.filters import FilterModel
from ..simulation.identity_match import IdentityMatchResult, IdentityMatchSimulator
from ..stores.campaigns import CampaignRecordStore
from ..stores.reference import ReferenceDataProvider
from ..targeting.audience import AudienceConfig, build_audience
from ..targeting.sizer import AudienceSizer

logger = logging.getLogger(__name__)


@dataclass
class CampaignDetails:
    """Step one of the wizard."""
    name: str = ""
    description: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_by: str = "system"


@dataclass
class ReferenceLists:
    medications: list = field(default_factory=list)  # List of Medication
    specialties: list = field(default_factory=list)  # List of Specialty
    regions: list = field(default_factory=list)  # List of Region


def derive_status(campaign: Campaign, today: date = None) -> CampaignStatus:
    """
    Status implied by the campaign's schedule on `today`.

    Drafts stay drafts. With both dates the campaign is active inside the
    range and completed after it; with only a start it is active once
    started; with only an end it is active until the end, then completed.
    Otherwise the stored status is kept.
    """
    if campaign.status == CampaignStatus.DRAFT:
        return campaign.status

    today = today or date.today()
    start, end = campaign.start_date, campaign.end_date

    if start and end:
        if start <= today <= end:
            return CampaignStatus.ACTIVE
        if today > end:
            return CampaignStatus.COMPLETED
    elif start:
        if today >= start:
            return CampaignStatus.ACTIVE
    elif end:
        return CampaignStatus.ACTIVE if today <= end else CampaignStatus.COMPLETED

    return campaign.status


class CampaignSetupUseCase:
    """
    Implements the campaign setup wizard.

    The identity match simulator is owned by the caller so it can be
    driven by whichever scheduler the host application runs.
    """

    def __init__(
        self,
        reference_data: ReferenceDataProvider,
        campaigns: CampaignRecordStore,
        simulator: IdentityMatchSimulator,
        sizer: AudienceSizer = None,
        rng: random.Random = None
    ):
        self.reference_data = reference_data
        self.campaigns = campaigns
        self.simulator = simulator
        self.sizer = sizer or AudienceSizer()
        self.rng = rng or random.Random()

    def load_reference_lists(self) -> ReferenceLists:
        """Fetch the catalogue the targeting step selects from."""
        try:
            return ReferenceLists(
                medications=self.reference_data.medications(),
                specialties=self.reference_data.specialties(),
                regions=self.reference_data.regions()
            )
        except Exception as e:
            logger.error("Reference data fetch failed: %s", e)
            raise CollaboratorError.wrap("reference_data", e) from e

    def validate_details(self, details: CampaignDetails) -> None:
        if not details.name or not details.name.strip():
            raise TargetingValidationError("Campaign name is required", field="name")
        if details.start_date is None:
            raise TargetingValidationError("Start date is required", field="start_date")
        if details.end_date is None:
            raise TargetingValidationError("End date is required", field="end_date")
        if details.end_date < details.start_date:
            raise TargetingValidationError(
                "End date must be on or after the start date", field="end_date"
            )

    def validate_targeting(self, filters: FilterModel) -> None:
        if not filters.medication_category and not filters.medications:
            raise TargetingValidationError(
                "Select a medication category or at least one medication",
                field="medication_category"
            )
        filters.validate_disjoint()

    def build_audience(self, name: str, filters: FilterModel) -> AudienceConfig:
        """Validate targeting and size the audience with its breakdown."""
        self.validate_targeting(filters)
        lists = self.load_reference_lists()
        return build_audience(
            name,
            filters,
            specialties=_selected(lists.specialties, filters.specialties),
            regions=_selected(lists.regions, filters.regions),
            sizer=self.sizer,
            rng=self.rng
        )

    def start_identity_match(self, audience: AudienceConfig) -> None:
        self.simulator.start(audience.provider_count)

    def require_identity_match_complete(self) -> IdentityMatchResult:
        return self.simulator.require_complete()

    def create_campaign(self, details: CampaignDetails, filters: FilterModel) -> Campaign:
        """
        Validate every step and persist a draft campaign.

        Top-level target fields take the first selected medication,
        specialty and region; the full selection goes into
        `targeting_metadata`.
        """
        self.validate_details(details)
        self.validate_targeting(filters)
        match = self.require_identity_match_complete()

        metadata = filters.to_targeting_metadata()
        metadata["description"] = details.description
        metadata["matched_providers"] = match.matched_providers
        metadata["total_providers"] = match.total_providers

        campaign = Campaign(
            name=details.name.strip(),
            status=CampaignStatus.DRAFT,
            target_medication_id=filters.medications[0] if filters.medications else None,
            target_specialty=filters.specialties[0] if filters.specialties else None,
            target_geographic_area=filters.regions[0] if filters.regions else None,
            targeting_metadata=metadata,
            start_date=details.start_date,
            end_date=details.end_date,
            created_by=details.created_by
        )

        try:
            stored = self.campaigns.create(campaign)
        except Exception as e:
            logger.error("Campaign create failed: %s", e)
            raise CollaboratorError.wrap("campaign_store", e) from e

        logger.info("Campaign %s created for %d matched providers", stored.id, match.matched_providers)
        return stored

    def refresh_status(self, campaign_id: str, today: date = None) -> Campaign:
        """Re-derive a stored campaign's status and write it back if it changed."""
        try:
            campaign = self.campaigns.fetch_by_id(campaign_id)
            if campaign is None:
                raise KeyError(campaign_id)
            status = derive_status(campaign, today)
            if status == campaign.status:
                return campaign
            return self.campaigns.update(campaign_id, {"status": status})
        except Exception as e:
            logger.error("Campaign status refresh failed for %s: %s", campaign_id, e)
            raise CollaboratorError.wrap("campaign_store", e) from e


def _selected(items, ids):
    """Items whose id was selected, or all items when nothing was."""
    if not ids:
        return list(items)
    wanted = set(ids)
    return [item for item in items if item.id in wanted]
