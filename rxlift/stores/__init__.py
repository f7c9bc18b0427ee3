"""
Collaborator Interfaces and Stores

- ReferenceDataProvider: medications, specialties, regions
- CampaignRecordStore: campaign records
- ScriptLiftConfigStore: per-campaign lift configurations
"""

from .reference import InMemoryReferenceData, ReferenceDataProvider
from .campaigns import CampaignRecordStore, InMemoryCampaignStore
from .script_lift import (
    InMemoryScriptLiftStore,
    JsonFileScriptLiftStore,
    ScriptLiftConfigStore,
    create_script_lift_store
)

__all__ = [
    "InMemoryReferenceData",
    "ReferenceDataProvider",
    "CampaignRecordStore",
    "InMemoryCampaignStore",
    "InMemoryScriptLiftStore",
    "JsonFileScriptLiftStore",
    "ScriptLiftConfigStore",
    "create_script_lift_store"
]
