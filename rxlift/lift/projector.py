"""
Lift Projector

Maintains the baseline/lift table of a ScriptLiftConfig and projects
prescription volumes for the target medication versus its comparison set.

Edits are copy-on-write: every setter replaces `LiftProjector.config`
with a new snapshot, so views holding an older snapshot can diff against
it. `compute_totals` is pure and can be called on any snapshot.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Optional, Sequence
import logging

from ..config.settings import LiftConfig, get_settings
from ..core.errors import TargetingValidationError
from .models import (
    ComparisonMode,
    LiftPreferences,
    MedicationLiftEntry,
    ScriptLiftConfig,
    round_half_up
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VolumeTotals:
    """Aggregated volumes for a set of medications."""
    baseline: float = 0
    projected: float = 0
    change: float = 0
    percent_change: float = 0.0


@dataclass(frozen=True)
class LiftTotals:
    target: VolumeTotals = field(default_factory=VolumeTotals)
    comparison: VolumeTotals = field(default_factory=VolumeTotals)


def _projected_decimal(entry: MedicationLiftEntry) -> Decimal:
    baseline = Decimal(str(entry.baseline_prescriptions))
    lift = Decimal(str(entry.lift_percentage))
    return baseline * (1 + lift / 100)


def projected_volume(entry: MedicationLiftEntry) -> float:
    """baseline x (1 + lift / 100), unrounded."""
    return float(_projected_decimal(entry))


def aggregate(entries: Iterable[MedicationLiftEntry]) -> VolumeTotals:
    """Sum baselines and projections; rounding happens only on the sum."""
    entries = list(entries)
    baseline = sum((Decimal(str(e.baseline_prescriptions)) for e in entries), Decimal(0))
    projected_raw = sum((_projected_decimal(e) for e in entries), Decimal(0))
    projected = round_half_up(float(projected_raw))
    raw_change = projected_raw - baseline
    return VolumeTotals(
        baseline=float(baseline),
        projected=projected,
        change=projected - float(baseline),
        percent_change=float(raw_change / baseline * 100) if baseline else 0.0
    )


def comparison_entries(
    config: ScriptLiftConfig,
    mode: ComparisonMode,
    selected_ids: Sequence[str] = ()
) -> list[MedicationLiftEntry]:
    """Active comparison set for the configuration's current target."""
    target = config.target()
    if target is None:
        return []
    if mode == ComparisonMode.WHOLE_CLASS:
        return [
            m for m in config.medications
            if not m.is_targeted and m.category == target.category
        ]
    selected = set(selected_ids)
    return [m for m in config.medications if not m.is_targeted and m.id in selected]


def compute_totals(
    config: ScriptLiftConfig,
    mode: Optional[ComparisonMode] = None,
    selected_ids: Optional[Sequence[str]] = None
) -> LiftTotals:
    """Target and comparison totals; zeros when no target is set."""
    prefs = config.preferences
    mode = mode or prefs.comparison_mode
    selected_ids = prefs.selected_medication_ids if selected_ids is None else selected_ids

    target = config.target()
    if target is None:
        return LiftTotals()

    return LiftTotals(
        target=aggregate([target]),
        comparison=aggregate(comparison_entries(config, mode, selected_ids))
    )


class LiftProjector:
    """
    Editor for a campaign's script-lift table.

    Invariant: at most one medication has is_targeted=True, and setting a
    new target clears the previous one in the same replacement.
    """

    def __init__(self, config: ScriptLiftConfig, lift_config: LiftConfig = None):
        self.config = config
        self.lift_config = lift_config or get_settings().lift

    @property
    def mode(self) -> ComparisonMode:
        return self.config.preferences.comparison_mode

    @property
    def selected_ids(self) -> list[str]:
        return list(self.config.preferences.selected_medication_ids)

    def _require_medication(self, medication_id: str) -> MedicationLiftEntry:
        entry = self.config.get_medication(medication_id)
        if entry is None:
            raise TargetingValidationError(
                f"Medication {medication_id} is not part of this configuration",
                field="medications"
            )
        return entry

    def set_target(self, medication_id: str) -> ScriptLiftConfig:
        """Mark one medication as the target and re-derive every other lift."""
        self._require_medication(medication_id)
        selected = [i for i in self.selected_ids if i != medication_id]
        marked = [
            m.model_copy(update={"is_targeted": m.id == medication_id})
            for m in self.config.medications
        ]
        staged = self.config.model_copy(update={
            "medications": marked,
            "preferences": LiftPreferences(
                comparison_mode=self.mode,
                selected_medication_ids=selected
            )
        })
        comparison_ids = {m.id for m in comparison_entries(staged, self.mode, selected)}

        medications = []
        for m in marked:
            if m.is_targeted:
                lift = self.lift_config.target_lift
            elif m.id in comparison_ids:
                lift = self.lift_config.comparison_lift
            else:
                lift = 0.0
            medications.append(m.model_copy(update={"lift_percentage": lift}))

        self.config = staged.model_copy(update={"medications": medications})
        logger.debug("Campaign %s target set to %s", self.config.campaign_id, medication_id)
        return self.config

    def set_comparison_mode(
        self,
        mode: ComparisonMode,
        medication_ids: Sequence[str] = ()
    ) -> ScriptLiftConfig:
        """Choose the comparison set: the target's whole class or specific ids."""
        selected = []
        if mode == ComparisonMode.SPECIFIC_IDS:
            for medication_id in medication_ids:
                self._require_medication(medication_id)
            target = self.config.target()
            selected = [i for i in dict.fromkeys(medication_ids) if target is None or i != target.id]

        preferences = LiftPreferences(comparison_mode=mode, selected_medication_ids=selected)
        target = self.config.target()
        if target is None:
            self.config = self.config.model_copy(update={"preferences": preferences})
            return self.config

        comparison_ids = {m.id for m in comparison_entries(self.config, mode, selected)}

        medications = []
        for m in self.config.medications:
            lift = m.lift_percentage
            if not m.is_targeted:
                lift = self.lift_config.comparison_lift if m.id in comparison_ids else 0.0
            medications.append(m.model_copy(update={"lift_percentage": lift}))

        self.config = self.config.model_copy(update={
            "medications": medications,
            "preferences": preferences
        })
        return self.config

    def set_lift(self, medication_id: str, lift_percentage: float) -> ScriptLiftConfig:
        """Override one medication's lift by hand."""
        self._require_medication(medication_id)
        self.config = self.config.model_copy(update={"medications": [
            m.model_copy(update={"lift_percentage": lift_percentage}) if m.id == medication_id else m
            for m in self.config.medications
        ]})
        return self.config

    def set_notes(self, notes: Optional[str]) -> ScriptLiftConfig:
        self.config = self.config.model_copy(update={"notes": notes or None})
        return self.config

    def totals(self) -> LiftTotals:
        return compute_totals(self.config)
