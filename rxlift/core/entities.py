"""
Core Entities - Reference Data and Campaign Records

Reference data (medications, specialties, regions) is read-only input
supplied by an external provider. Campaign records are owned by an
external record store; the engine only writes targeting fields onto them.

Entities:
- Medication: Product with a therapeutic category
- Specialty: Prescriber specialty
- Region: Geographic region (state, metro, territory)
- Campaign: Campaign record with targeting metadata
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

COMPETITOR_CATEGORY = "competitors"


class CampaignStatus(Enum):
    """Campaign lifecycle states."""
    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    PAUSED = "paused"


@dataclass(frozen=True)
class Medication:
    """A medication from the reference catalogue."""
    id: str
    name: str
    category: str = ""
    description: Optional[str] = None

    @property
    def is_competitor(self) -> bool:
        return self.category == COMPETITOR_CATEGORY


@dataclass(frozen=True)
class Specialty:
    """A prescriber specialty."""
    id: str
    name: str
    description: Optional[str] = None


@dataclass(frozen=True)
class Region:
    """A geographic region."""
    id: str
    name: str
    type: str = ""
    population: Optional[int] = None


@dataclass
class Campaign:
    """
    Campaign record as held by the record store.

    `targeting_metadata` is free-form and captures the filter fields that
    produced the audience (excluded medications, volume tier, timeframe...).
    """
    id: str = field(default_factory=lambda: str(uuid4()))
    name: str = ""
    status: CampaignStatus = CampaignStatus.DRAFT

    # Top-level targeting
    target_medication_id: Optional[str] = None
    target_specialty: Optional[str] = None
    target_geographic_area: Optional[str] = None
    targeting_metadata: dict = field(default_factory=dict)

    # Schedule
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    created_by: str = "system"
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def medication_category(self) -> Optional[str]:
        return self.targeting_metadata.get("medication_category") or None
