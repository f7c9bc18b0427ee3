"""
Identity Match Simulation

A scripted, time-paced progress display for resolving a nominal provider
count against a provider registry. It is not a matcher: the outcome is a
fixed success rate applied to the count captured at launch.

Stage timeline (defaults, seconds from launch):
- [0.0, 2.0)  parsing    10%
- [2.0, 4.5)  matching   30%
- [4.5, 7.0)  analyzing  70%
- [7.0, 8.0)  analyzing 100% (hold)
- 8.0+        complete  100% with results

`state_at` is the pure timeline; IdentityMatchSimulator drives it with one
cancellable timer at a time on an injected scheduler.
"""

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_FLOOR
from enum import Enum
from typing import Callable, Optional
import logging

from ..config.settings import MatchConfig, get_settings
from ..core.errors import TargetingValidationError
from .scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class MatchStage(Enum):
    """Identity match stages, in order."""
    NOT_STARTED = "not_started"
    PARSING = "parsing"
    MATCHING = "matching"
    ANALYZING = "analyzing"
    COMPLETE = "complete"


STAGE_ORDER = [
    MatchStage.NOT_STARTED,
    MatchStage.PARSING,
    MatchStage.MATCHING,
    MatchStage.ANALYZING,
    MatchStage.COMPLETE
]

STAGE_PROGRESS = {
    MatchStage.NOT_STARTED: 0,
    MatchStage.PARSING: 10,
    MatchStage.MATCHING: 30,
    MatchStage.ANALYZING: 70,
    MatchStage.COMPLETE: 100
}

STAGE_OPERATIONS = {
    MatchStage.PARSING: "Parsing provider records",
    MatchStage.MATCHING: "Matching providers against registry",
    MatchStage.ANALYZING: "Analyzing match confidence",
    MatchStage.COMPLETE: "Identity matching complete"
}

HOLD_OPERATION = "Finalizing match results"

# Share of matched providers per confidence bucket; low takes the remainder
HIGH_CONFIDENCE_SHARE = 75
MEDIUM_CONFIDENCE_SHARE = 20


@dataclass(frozen=True)
class ConfidenceScores:
    high: int = 0
    medium: int = 0
    low: int = 0


@dataclass(frozen=True)
class IdentityMatchResult:
    """Terminal outcome of a simulated identity match."""
    matched_providers: int = 0
    total_providers: int = 0
    match_percentage: int = 0
    confidence_scores: ConfidenceScores = field(default_factory=ConfidenceScores)


@dataclass(frozen=True)
class IdentityMatchState:
    """Snapshot of simulation progress."""
    stage: MatchStage = MatchStage.NOT_STARTED
    progress: int = 0
    current_operation: Optional[str] = None
    result: Optional[IdentityMatchResult] = None

    @property
    def is_complete(self) -> bool:
        return self.stage == MatchStage.COMPLETE

    @property
    def stage_index(self) -> int:
        return STAGE_ORDER.index(self.stage)


def compute_match_result(total_providers: int, success_rate: float = 0.98) -> IdentityMatchResult:
    """floor(total x rate) matched providers, split into confidence buckets."""
    rate = Decimal(str(success_rate))
    matched = int((Decimal(max(0, total_providers)) * rate).to_integral_value(rounding=ROUND_FLOOR))
    high = matched * HIGH_CONFIDENCE_SHARE // 100
    medium = matched * MEDIUM_CONFIDENCE_SHARE // 100
    return IdentityMatchResult(
        matched_providers=matched,
        total_providers=total_providers,
        match_percentage=int(rate * 100),
        confidence_scores=ConfidenceScores(high=high, medium=medium, low=matched - high - medium)
    )


@dataclass(frozen=True)
class MatchTimeline:
    """Absolute checkpoint times (seconds from launch)."""
    matching_at: float = 2.0
    analyzing_at: float = 4.5
    hold_at: float = 7.0
    complete_at: float = 8.0

    @classmethod
    def from_config(cls, config: MatchConfig) -> "MatchTimeline":
        matching_at = config.parsing_seconds
        analyzing_at = matching_at + config.matching_seconds
        hold_at = analyzing_at + config.analyzing_seconds
        return cls(
            matching_at=matching_at,
            analyzing_at=analyzing_at,
            hold_at=hold_at,
            complete_at=hold_at + config.hold_seconds
        )

    def checkpoints(self) -> list[float]:
        return [0.0, self.matching_at, self.analyzing_at, self.hold_at, self.complete_at]


def state_at(
    total_providers: int,
    elapsed: float,
    config: MatchConfig = None,
    timeline: MatchTimeline = None
) -> IdentityMatchState:
    """Pure (total, elapsed) -> state function for the stage timeline."""
    config = config or get_settings().match
    timeline = timeline or MatchTimeline.from_config(config)

    if elapsed < 0:
        return IdentityMatchState()
    if elapsed < timeline.matching_at:
        stage = MatchStage.PARSING
    elif elapsed < timeline.analyzing_at:
        stage = MatchStage.MATCHING
    elif elapsed < timeline.hold_at:
        stage = MatchStage.ANALYZING
    elif elapsed < timeline.complete_at:
        return IdentityMatchState(
            stage=MatchStage.ANALYZING,
            progress=STAGE_PROGRESS[MatchStage.COMPLETE],
            current_operation=HOLD_OPERATION
        )
    else:
        return IdentityMatchState(
            stage=MatchStage.COMPLETE,
            progress=STAGE_PROGRESS[MatchStage.COMPLETE],
            current_operation=STAGE_OPERATIONS[MatchStage.COMPLETE],
            result=compute_match_result(total_providers, config.success_rate)
        )

    return IdentityMatchState(
        stage=stage,
        progress=STAGE_PROGRESS[stage],
        current_operation=STAGE_OPERATIONS[stage]
    )


class IdentityMatchSimulator:
    """
    Drives the stage timeline on a scheduler.

    At most one timer is outstanding. `start` cancels any run in flight;
    `cancel` invalidates the outstanding handle and the run's generation,
    so a callback that still fires afterwards writes nothing.
    """

    def __init__(self, scheduler: Scheduler, config: MatchConfig = None):
        self._scheduler = scheduler
        self.config = config or get_settings().match
        self._timeline = MatchTimeline.from_config(self.config)

        self._state = IdentityMatchState()
        self._total_providers: Optional[int] = None
        self._handle: Optional[TimerHandle] = None
        self._generation = 0
        self._checkpoint = 0
        self._subscribers: list[Callable[[IdentityMatchState], None]] = []

    @property
    def state(self) -> IdentityMatchState:
        return self._state

    @property
    def total_providers(self) -> Optional[int]:
        return self._total_providers

    @property
    def is_active(self) -> bool:
        return self._handle is not None and not self._handle.cancelled

    def subscribe(self, callback: Callable[[IdentityMatchState], None]) -> Callable[[], None]:
        """Register for state pushes; returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def start(self, total_providers: int) -> IdentityMatchState:
        """Launch a run for a provider count captured now and frozen."""
        self.cancel()
        self._generation += 1
        self._total_providers = max(0, int(total_providers))
        self._checkpoint = 0
        self._state = IdentityMatchState()
        logger.info("Identity match started for %d providers", self._total_providers)
        self._enter_checkpoint(self._generation)
        return self._state

    def cancel(self) -> None:
        """Abandon the run in flight; the last published state is kept."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            logger.debug("Identity match run %d cancelled", self._generation)
        self._generation += 1

    def require_complete(self) -> IdentityMatchResult:
        """Result of a finished run, or a validation error."""
        if not self._state.is_complete or self._state.result is None:
            raise TargetingValidationError(
                "Identity matching must complete before continuing",
                field="identity_match"
            )
        return self._state.result

    def _enter_checkpoint(self, generation: int) -> None:
        if generation != self._generation:
            return

        checkpoints = self._timeline.checkpoints()
        elapsed = checkpoints[self._checkpoint]
        self._publish(state_at(self._total_providers, elapsed, self.config, self._timeline))

        if self._checkpoint + 1 < len(checkpoints):
            delay = checkpoints[self._checkpoint + 1] - elapsed
            self._checkpoint += 1
            self._handle = self._scheduler.call_later(
                delay, lambda: self._enter_checkpoint(generation)
            )
        else:
            self._handle = None

    def _publish(self, state: IdentityMatchState) -> None:
        if state.stage_index < self._state.stage_index or state.progress < self._state.progress:
            raise RuntimeError(f"Stage regression: {self._state.stage} -> {state.stage}")
        self._state = state
        logger.debug("Identity match %s at %d%%", state.stage.value, state.progress)
        for callback in list(self._subscribers):
            try:
                callback(state)
            except Exception:
                logger.exception("Identity match subscriber failed")
