"""
Reference Data Provider

Read-only catalogue of medications, specialties and regions. The engine
never writes reference data; production deployments back this with a
database, tests and the demo use the in-memory provider.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from ..core.entities import Medication, Region, Specialty


class ReferenceDataProvider(ABC):
    """Source of reference lists for targeting."""

    @abstractmethod
    def medications(self) -> list[Medication]:
        pass

    @abstractmethod
    def specialties(self) -> list[Specialty]:
        pass

    @abstractmethod
    def regions(self) -> list[Region]:
        pass


class InMemoryReferenceData(ReferenceDataProvider):
    """Reference data held in lists, returned in insertion order."""

    def __init__(
        self,
        medications: Iterable[Medication] = (),
        specialties: Iterable[Specialty] = (),
        regions: Iterable[Region] = ()
    ):
        self._medications = list(medications)
        self._specialties = list(specialties)
        self._regions = list(regions)

    def medications(self) -> list[Medication]:
        return list(self._medications)

    def specialties(self) -> list[Specialty]:
        return list(self._specialties)

    def regions(self) -> list[Region]:
        return list(self._regions)

    def get_medication(self, medication_id: str) -> Optional[Medication]:
        return next((m for m in self._medications if m.id == medication_id), None)

    def get_specialty(self, specialty_id: str) -> Optional[Specialty]:
        return next((s for s in self._specialties if s.id == specialty_id), None)

    def get_region(self, region_id: str) -> Optional[Region]:
        return next((r for r in self._regions if r.id == region_id), None)

    def categories(self) -> list[str]:
        """Distinct medication categories in first-seen order."""
        return list(dict.fromkeys(m.category for m in self._medications if m.category))
