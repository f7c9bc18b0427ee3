"""
Identity Match Simulation

Purpose: show a staged, time-paced resolution of a sized provider count
against a provider registry. It does not perform entity resolution; the
outcome is a fixed success rate.

Components:
- Schedulers: fake clock for tests, asyncio loop for applications
- Pure stage timeline: (total, elapsed) -> state
- IdentityMatchSimulator: cancellable driver with push subscriptions
"""

from .scheduler import (
    AsyncioScheduler,
    ManualScheduler,
    Scheduler,
    TimerHandle
)
from .identity_match import (
    ConfidenceScores,
    IdentityMatchResult,
    IdentityMatchSimulator,
    IdentityMatchState,
    MatchStage,
    MatchTimeline,
    compute_match_result,
    state_at
)

__all__ = [
    "AsyncioScheduler",
    "ManualScheduler",
    "Scheduler",
    "TimerHandle",
    "ConfidenceScores",
    "IdentityMatchResult",
    "IdentityMatchSimulator",
    "IdentityMatchState",
    "MatchStage",
    "MatchTimeline",
    "compute_match_result",
    "state_at"
]
