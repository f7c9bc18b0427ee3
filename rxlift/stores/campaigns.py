"""
Campaign Record Store

The record store owns campaign rows; the engine creates them at the end
of the setup wizard and updates their targeting fields.
"""

from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Optional
import logging

from ..core.entities import Campaign

logger = logging.getLogger(__name__)


class CampaignRecordStore(ABC):
    """Persistence interface for campaign records."""

    @abstractmethod
    def create(self, campaign: Campaign) -> Campaign:
        """Persist a new campaign and return the stored record."""
        pass

    @abstractmethod
    def fetch_by_id(self, campaign_id: str) -> Optional[Campaign]:
        pass

    @abstractmethod
    def list(self) -> list[Campaign]:
        pass

    @abstractmethod
    def update(self, campaign_id: str, patch: dict) -> Campaign:
        """
        Apply a partial update to an existing record.

        Fields absent from `patch` keep their stored values. Raises KeyError
        for an unknown id and ValueError if the patch tries to change the id.
        """
        pass


class InMemoryCampaignStore(CampaignRecordStore):
    """Dict-backed store; records are copied in and out."""

    def __init__(self):
        self._records: dict[str, Campaign] = {}

    def create(self, campaign: Campaign) -> Campaign:
        if campaign.id in self._records:
            raise ValueError(f"Campaign {campaign.id} already exists")
        self._records[campaign.id] = replace(campaign, targeting_metadata=dict(campaign.targeting_metadata))
        logger.info("Created campaign %s (%s)", campaign.id, campaign.name)
        return self.fetch_by_id(campaign.id)

    def fetch_by_id(self, campaign_id: str) -> Optional[Campaign]:
        record = self._records.get(campaign_id)
        if record is None:
            return None
        return replace(record, targeting_metadata=dict(record.targeting_metadata))

    def list(self) -> list[Campaign]:
        return [self.fetch_by_id(campaign_id) for campaign_id in self._records]

    def update(self, campaign_id: str, patch: dict) -> Campaign:
        record = self._records.get(campaign_id)
        if record is None:
            raise KeyError(campaign_id)
        if patch.get("id", campaign_id) != campaign_id:
            raise ValueError(f"Campaign id cannot change from {campaign_id}")

        updated = replace(record, **patch)
        self._records[campaign_id] = replace(updated, targeting_metadata=dict(updated.targeting_metadata))
        logger.debug("Updated campaign %s fields: %s", campaign_id, ", ".join(sorted(patch)))
        return self.fetch_by_id(campaign_id)
