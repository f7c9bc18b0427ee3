"""
Script-Lift Configuration Models

Persisted per campaign. Field names serialize in camelCase so stored
records keep the shape the reporting views already read.
"""

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ComparisonMode(str, Enum):
    """How the comparison set for the target medication is chosen."""
    WHOLE_CLASS = "whole_class"
    SPECIFIC_IDS = "specific_ids"


class _LiftModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MedicationLiftEntry(_LiftModel):
    """Baseline and lift for one medication."""
    id: str
    name: str = ""
    category: str = ""
    baseline_prescriptions: float = Field(default=0, ge=0)
    lift_percentage: float = 0.0
    is_targeted: bool = False
    is_competitor: Optional[bool] = None


class WeightedLabel(_LiftModel):
    """Share of campaign impact attributed to a specialty or region."""
    id: str
    name: str
    percentage: float = 0.0


class CampaignImpact(_LiftModel):
    overall_lift_percentage: float = 22.5
    estimated_roi: float = Field(default=165.0, alias="estimatedROI")
    market_share_change: float = 3.2
    time_to_impact: int = 8  # weeks


class LiftPreferences(_LiftModel):
    """Comparison selections restored when a configuration is reopened."""
    comparison_mode: ComparisonMode = ComparisonMode.WHOLE_CLASS
    selected_medication_ids: list[str] = Field(default_factory=list)


class ScriptLiftConfig(_LiftModel):
    """Script-lift configuration for a single campaign."""
    campaign_id: str
    campaign_name: str = ""
    medications: list[MedicationLiftEntry] = Field(default_factory=list)
    specialties: list[WeightedLabel] = Field(default_factory=list)
    regions: list[WeightedLabel] = Field(default_factory=list)
    campaign_impact: CampaignImpact = Field(default_factory=CampaignImpact)
    created_at: datetime = Field(default_factory=datetime.now)
    last_modified: datetime = Field(default_factory=datetime.now)
    notes: Optional[str] = None
    preferences: LiftPreferences = Field(default_factory=LiftPreferences)

    def target(self) -> Optional[MedicationLiftEntry]:
        return next((m for m in self.medications if m.is_targeted), None)

    def get_medication(self, medication_id: str) -> Optional[MedicationLiftEntry]:
        return next((m for m in self.medications if m.id == medication_id), None)

    def to_record(self) -> dict:
        """JSON-ready dict in the stored (camelCase) shape."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_record(cls, record: dict) -> "ScriptLiftConfig":
        return cls.model_validate(record)


def round_half_up(value: float, places: int = 0) -> float:
    """Round halves away from zero (0.5 -> 1), unlike round()."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
