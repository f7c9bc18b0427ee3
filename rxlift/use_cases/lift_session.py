"""
Use Case: Script-Lift Configuration

An operator opens a campaign's lift table, picks the target medication
and comparison set, reviews projected totals and saves. Saving persists
the configuration and then asks the prescription-data collaborator to
regenerate projections; that second call is best effort.
"""

from typing import Callable, Optional, Sequence
import logging
import random

from ..config.settings import LiftConfig, get_settings
from ..core.entities import Campaign
from ..core.errors import CollaboratorError
from ..lift.generator import generate_default
from ..lift.models import ComparisonMode, ScriptLiftConfig
from ..lift.projector import LiftProjector, LiftTotals
from ..stores.reference import ReferenceDataProvider
from ..stores.script_lift import ScriptLiftConfigStore

logger = logging.getLogger(__name__)

PrescriptionRegenerator = Callable[[str], None]


class LiftConfigurationSession:
    """
    One editing session over a campaign's script-lift configuration.

    Edits go through a LiftProjector and stay local until `save`.
    """

    def __init__(
        self,
        store: ScriptLiftConfigStore,
        reference_data: ReferenceDataProvider,
        regenerator: Optional[PrescriptionRegenerator] = None,
        lift_config: LiftConfig = None,
        rng: random.Random = None
    ):
        self.store = store
        self.reference_data = reference_data
        self.regenerator = regenerator
        self.lift_config = lift_config or get_settings().lift
        self.rng = rng or random.Random()
        self._projector: Optional[LiftProjector] = None

    @property
    def config(self) -> Optional[ScriptLiftConfig]:
        return self._projector.config if self._projector else None

    def _require_open(self) -> LiftProjector:
        if self._projector is None:
            raise RuntimeError("No lift configuration is open")
        return self._projector

    def open(self, campaign: Campaign) -> ScriptLiftConfig:
        """Load the stored configuration, or generate a default one."""
        try:
            config = self.store.get(campaign.id)
        except Exception as e:
            logger.error("Script lift config load failed for %s: %s", campaign.id, e)
            raise CollaboratorError.wrap("script_lift_store", e) from e

        if config is None:
            try:
                medications = self.reference_data.medications()
            except Exception as e:
                logger.error("Reference data fetch failed: %s", e)
                raise CollaboratorError.wrap("reference_data", e) from e

            logger.info("Generating default script lift configuration for %s", campaign.id)
            config = generate_default(
                campaign.id,
                campaign.name,
                medications,
                target_medication_id=campaign.target_medication_id,
                target_category=campaign.medication_category,
                rng=self.rng,
                lift_config=self.lift_config
            )

        self._projector = LiftProjector(config, self.lift_config)
        return config

    def set_target(self, medication_id: str) -> ScriptLiftConfig:
        return self._require_open().set_target(medication_id)

    def set_comparison(
        self,
        mode: ComparisonMode,
        medication_ids: Sequence[str] = ()
    ) -> ScriptLiftConfig:
        return self._require_open().set_comparison_mode(mode, medication_ids)

    def set_lift(self, medication_id: str, lift_percentage: float) -> ScriptLiftConfig:
        return self._require_open().set_lift(medication_id, lift_percentage)

    def set_notes(self, notes: Optional[str]) -> ScriptLiftConfig:
        return self._require_open().set_notes(notes)

    def totals(self) -> LiftTotals:
        return self._require_open().totals()

    def save(self) -> ScriptLiftConfig:
        """
        Persist the configuration, then request prescription regeneration.

        The campaign impact's overall lift is taken from the target
        medication, or 0 when no target is set.

        A store failure raises CollaboratorError. A regeneration failure is
        logged and the saved configuration is still returned.
        """
        projector = self._require_open()
        config = projector.config
        target = config.target()
        impact = config.campaign_impact.model_copy(update={
            "overall_lift_percentage": target.lift_percentage if target else 0.0
        })
        config = config.model_copy(update={"campaign_impact": impact})
        try:
            saved = self.store.put(config)
        except Exception as e:
            logger.error("Script lift config save failed for %s: %s", config.campaign_id, e)
            raise CollaboratorError.wrap("script_lift_store", e) from e

        projector.config = saved

        if self.regenerator is not None:
            try:
                self.regenerator(saved.campaign_id)
            except Exception:
                logger.exception("Prescription regeneration failed for campaign %s", saved.campaign_id)

        return saved
