"""
Targeting Filter Model

A FilterModel is an immutable snapshot of the operator's targeting
selections. Editing a field produces a new snapshot, so sizing and
comparison always run against a value that cannot change underneath them.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from .errors import TargetingValidationError


class VolumeTier(str, Enum):
    """Prescribing-volume tiers."""
    ALL = "all"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Timeframe(str, Enum):
    """Analysis windows."""
    LAST_MONTH = "last_month"
    LAST_QUARTER = "last_quarter"
    LAST_YEAR = "last_year"


class FilterModel(BaseModel):
    """Targeting specification for an audience."""
    model_config = ConfigDict(frozen=True)

    medication_category: Optional[str] = None
    medications: tuple[str, ...] = ()
    excluded_medications: tuple[str, ...] = ()
    specialties: tuple[str, ...] = ()
    regions: tuple[str, ...] = ()
    prescribing_volume: VolumeTier = VolumeTier.ALL
    timeframe: Timeframe = Timeframe.LAST_QUARTER

    @field_validator("medication_category", mode="before")
    @classmethod
    def _blank_category_is_unset(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def is_unset(self) -> bool:
        """True when no field narrows the audience (timeframe never does)."""
        return (
            not self.medication_category
            and not self.medications
            and not self.excluded_medications
            and not self.specialties
            and not self.regions
            and self.prescribing_volume == VolumeTier.ALL
        )

    def with_field(self, name: str, value: Any) -> "FilterModel":
        """Return a new snapshot with one field replaced."""
        if name not in type(self).model_fields:
            raise TargetingValidationError(f"Unknown filter field: {name}", field=name)
        data = self.model_dump()
        data[name] = value
        return type(self).model_validate(data)

    def changed_fields(self, other: "FilterModel") -> list[str]:
        """Names of fields whose values differ from `other`."""
        return [
            name for name in type(self).model_fields
            if getattr(self, name) != getattr(other, name)
        ]

    def overlapping_medications(self) -> tuple[str, ...]:
        excluded = set(self.excluded_medications)
        return tuple(m for m in self.medications if m in excluded)

    def validate_disjoint(self) -> None:
        overlap = self.overlapping_medications()
        if overlap:
            raise TargetingValidationError(
                f"Medications cannot be both included and excluded: {', '.join(overlap)}",
                field="excluded_medications"
            )

    def to_targeting_metadata(self) -> dict:
        """Free-form metadata written onto campaign records."""
        return {
            "medication_category": self.medication_category,
            "medications": list(self.medications),
            "excluded_medications": list(self.excluded_medications),
            "specialties": list(self.specialties),
            "regions": list(self.regions),
            "prescribing_volume": self.prescribing_volume.value,
            "timeframe": self.timeframe.value,
        }
