"""
Unit tests for rxlift/simulation/identity_match.py and scheduler.py

Tests the staged identity match simulation:
- Match arithmetic and confidence buckets
- Pure stage timeline
- Monotonic stage pushes on a fake clock
- Cancellation and restart leave no stale timers
- Asyncio-backed scheduler
"""

import asyncio

import pytest

from rxlift.config import MatchConfig
from rxlift.core import TargetingValidationError
from rxlift.simulation import (
    AsyncioScheduler,
    IdentityMatchSimulator,
    ManualScheduler,
    MatchStage,
    MatchTimeline,
    compute_match_result,
    state_at
)
from rxlift.simulation.identity_match import STAGE_ORDER


class TestMatchArithmetic:

    def test_thousand_providers(self):
        result = compute_match_result(1000, 0.98)
        assert result.matched_providers == 980
        assert result.total_providers == 1000
        assert result.match_percentage == 98

    def test_matched_is_floored(self):
        assert compute_match_result(472, 0.98).matched_providers == 462

    def test_confidence_buckets_sum_to_matched(self):
        result = compute_match_result(1000, 0.98)
        scores = result.confidence_scores
        assert (scores.high, scores.medium, scores.low) == (735, 196, 49)
        assert scores.high + scores.medium + scores.low == result.matched_providers

    def test_zero_providers(self):
        result = compute_match_result(0, 0.98)
        assert result.matched_providers == 0
        assert result.confidence_scores.low == 0


class TestTimeline:

    def test_default_checkpoints(self, match_config):
        assert MatchTimeline.from_config(match_config).checkpoints() == [0.0, 2.0, 4.5, 7.0, 8.0]

    @pytest.mark.parametrize("elapsed,stage,progress", [
        (0.0, MatchStage.PARSING, 10),
        (1.99, MatchStage.PARSING, 10),
        (2.0, MatchStage.MATCHING, 30),
        (4.5, MatchStage.ANALYZING, 70),
        (7.0, MatchStage.ANALYZING, 100),
        (8.0, MatchStage.COMPLETE, 100),
        (60.0, MatchStage.COMPLETE, 100),
    ])
    def test_state_at(self, match_config, elapsed, stage, progress):
        state = state_at(1000, elapsed, match_config)
        assert state.stage == stage
        assert state.progress == progress

    def test_result_only_when_complete(self, match_config):
        assert state_at(1000, 7.5, match_config).result is None
        assert state_at(1000, 8.0, match_config).result.matched_providers == 980


class TestSimulator:
    """Tests for the scheduler-driven simulator."""

    def test_runs_to_completion(self, simulator, scheduler):
        simulator.start(1000)
        assert simulator.state.stage == MatchStage.PARSING

        scheduler.run_until_idle()

        assert simulator.state.is_complete
        assert simulator.require_complete().matched_providers == 980
        assert not simulator.is_active
        assert scheduler.pending_count == 0

    def test_stage_sequence_is_monotonic(self, simulator, scheduler):
        seen = []
        simulator.subscribe(seen.append)
        simulator.start(1000)
        scheduler.run_until_idle()

        stages = [s.stage for s in seen]
        indices = [STAGE_ORDER.index(stage) for stage in stages]
        assert indices == sorted(indices)
        assert list(dict.fromkeys(stages)) == [
            MatchStage.PARSING, MatchStage.MATCHING, MatchStage.ANALYZING, MatchStage.COMPLETE
        ]
        progress = [s.progress for s in seen]
        assert progress == sorted(progress)

    def test_timing_on_fake_clock(self, simulator, scheduler):
        simulator.start(1000)

        scheduler.advance(1.5)
        assert simulator.state.stage == MatchStage.PARSING
        scheduler.advance(0.5)
        assert simulator.state.stage == MatchStage.MATCHING
        scheduler.advance(2.5)
        assert simulator.state.stage == MatchStage.ANALYZING
        scheduler.advance(2.5)
        assert simulator.state.progress == 100
        assert not simulator.state.is_complete
        scheduler.advance(1.0)
        assert simulator.state.is_complete

    def test_total_is_frozen_at_launch(self, simulator, scheduler):
        simulator.start(500)
        scheduler.run_until_idle()
        assert simulator.total_providers == 500
        assert simulator.state.result.total_providers == 500

    def test_one_timer_outstanding(self, simulator, scheduler):
        simulator.start(1000)
        assert scheduler.pending_count == 1
        scheduler.advance(3.0)
        assert scheduler.pending_count == 1

    def test_cancel_stops_updates(self, simulator, scheduler):
        seen = []
        simulator.subscribe(seen.append)
        simulator.start(1000)
        scheduler.advance(3.0)
        simulator.cancel()

        count = len(seen)
        scheduler.advance(30.0)

        assert len(seen) == count
        assert simulator.state.stage == MatchStage.MATCHING
        assert not simulator.is_active

    def test_restart_discards_first_run(self, simulator, scheduler):
        simulator.start(1000)
        scheduler.advance(5.0)
        simulator.start(200)
        assert simulator.state.stage == MatchStage.PARSING

        scheduler.run_until_idle()
        assert simulator.state.result.total_providers == 200
        assert simulator.state.result.matched_providers == 196

    def test_require_complete_before_finish(self, simulator, scheduler):
        simulator.start(1000)
        scheduler.advance(7.5)
        with pytest.raises(TargetingValidationError, match="must complete") as exc_info:
            simulator.require_complete()
        assert exc_info.value.field == "identity_match"

    def test_unsubscribe(self, simulator, scheduler):
        seen = []
        unsubscribe = simulator.subscribe(seen.append)
        simulator.start(1000)
        unsubscribe()
        scheduler.run_until_idle()
        assert len(seen) == 1

    def test_failing_subscriber_does_not_stop_run(self, simulator, scheduler):
        def broken(state):
            raise ValueError("render failed")

        simulator.subscribe(broken)
        simulator.start(1000)
        scheduler.run_until_idle()
        assert simulator.state.is_complete


class TestManualScheduler:

    def test_fires_in_due_order(self):
        scheduler = ManualScheduler()
        fired = []
        scheduler.call_later(2.0, lambda: fired.append("b"))
        scheduler.call_later(1.0, lambda: fired.append("a"))
        scheduler.call_later(2.0, lambda: fired.append("c"))

        scheduler.advance(2.0)
        assert fired == ["a", "b", "c"]
        assert scheduler.time() == 2.0

    def test_cancelled_handle_never_fires(self):
        scheduler = ManualScheduler()
        fired = []
        handle = scheduler.call_later(1.0, lambda: fired.append("x"))
        handle.cancel()
        scheduler.advance(5.0)
        assert fired == []
        assert handle.cancelled


class TestAsyncioScheduler:

    def test_runs_on_event_loop(self):
        config = MatchConfig(
            parsing_seconds=0.01,
            matching_seconds=0.01,
            analyzing_seconds=0.01,
            hold_seconds=0.01,
            success_rate=0.98
        )

        async def run():
            simulator = IdentityMatchSimulator(AsyncioScheduler(), config)
            simulator.start(1000)
            for _ in range(100):
                if simulator.state.is_complete:
                    break
                await asyncio.sleep(0.01)
            return simulator.state

        state = asyncio.run(run())
        assert state.is_complete
        assert state.result.matched_providers == 980
