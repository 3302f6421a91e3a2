# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Tests for retry policy resolution, backoff, classification and the failover controller."""

import asyncio
import random

import pytest
from governor.services.failover.backoff import BACKOFF_FLOOR_MS, compute_backoff_delay
from governor.services.failover.classifier import FailureKind, classify_failure
from governor.services.failover.controller import (
    FailoverAction,
    FailoverState,
    FailoverTracker,
    decide_failover,
)
from governor.services.failover.policy import (
    DEFAULT_BACKOFF_SCHEDULE_MS,
    FailoverConfig,
    RetryPolicy,
    resolve_retry_policy,
)
from pydantic import ValidationError

# ===========================================================================
# resolve_retry_policy
# ===========================================================================


class TestResolveRetryPolicy:
    """Tests for field-wise default resolution."""

    def test_defaults_when_none(self):
        """Verify defaults apply when no config is given."""
        policy = resolve_retry_policy(None)
        assert policy.max_retries == 1
        assert policy.backoff_schedule_ms == (300, 1200)

    def test_defaults_when_fields_unset(self):
        """Verify defaults apply to unset fields."""
        policy = resolve_retry_policy(FailoverConfig())
        assert policy == RetryPolicy()

    def test_custom_values(self):
        """Verify explicit values are kept."""
        policy = resolve_retry_policy(
            FailoverConfig(max_retries=3, backoff_schedule_ms=[500, 1000, 2000])
        )
        assert policy.max_retries == 3
        assert policy.backoff_schedule_ms == (500, 1000, 2000)

    def test_zero_disables_retries(self):
        """Verify an explicit zero is not replaced by the default."""
        policy = resolve_retry_policy(FailoverConfig(max_retries=0))
        assert policy.max_retries == 0
        assert policy.backoff_schedule_ms == DEFAULT_BACKOFF_SCHEDULE_MS

    def test_explicit_empty_schedule_kept(self):
        """Verify an explicit empty schedule is not replaced by the default."""
        policy = resolve_retry_policy(FailoverConfig(backoff_schedule_ms=[]))
        assert policy.backoff_schedule_ms == ()
        assert policy.max_retries == 1

    def test_negative_retries_rejected(self):
        """Verify negative retry counts fail validation."""
        with pytest.raises(ValidationError):
            FailoverConfig(max_retries=-1)

    def test_non_positive_delay_rejected(self):
        """Verify zero or negative schedule entries fail validation."""
        with pytest.raises(ValidationError):
            FailoverConfig(backoff_schedule_ms=[300, 0])

    def test_policy_is_immutable(self):
        """Verify a resolved policy cannot be modified."""
        policy = resolve_retry_policy()
        with pytest.raises(AttributeError):
            policy.max_retries = 5  # type: ignore[misc]


# ===========================================================================
# compute_backoff_delay
# ===========================================================================


class TestComputeBackoffDelay:
    """Tests for jittered backoff delays."""

    def test_base_per_attempt(self):
        """Verify each attempt uses its own schedule entry plus < 30% jitter."""
        schedule = [300, 1200]
        for _ in range(50):
            assert 300 <= compute_backoff_delay(schedule, 0) < 390
            assert 1200 <= compute_backoff_delay(schedule, 1) < 1560

    def test_clamps_to_last_entry(self):
        """Verify attempts past the schedule use the last entry."""
        for _ in range(50):
            assert 1200 <= compute_backoff_delay([300, 1200], 5) < 1560

    def test_empty_schedule_uses_floor(self):
        """Verify an empty schedule falls back to the floor delay."""
        for _ in range(50):
            delay = compute_backoff_delay([], 0)
            assert BACKOFF_FLOOR_MS <= delay < BACKOFF_FLOOR_MS * 1.3

    def test_negative_attempt_uses_first_entry(self):
        """Verify a negative attempt index is treated as the first attempt."""
        assert 500 <= compute_backoff_delay([500, 9000], -3) < 650

    def test_zero_jitter_returns_base(self):
        """Verify the lower bound is exactly the base delay."""
        rng = random.Random()
        rng.random = lambda: 0.0  # type: ignore[method-assign]
        assert compute_backoff_delay([300, 1200], 1, rng=rng) == 1200

    def test_max_jitter_below_upper_bound(self):
        """Verify the largest jitter stays strictly below 1.3x base."""
        rng = random.Random()
        rng.random = lambda: 0.9999999999  # type: ignore[method-assign]
        assert compute_backoff_delay([1000], 0, rng=rng) == 1299

    def test_returns_int(self, seeded_rng):
        """Verify the delay is an integer number of milliseconds."""
        assert isinstance(compute_backoff_delay([333], 0, rng=seeded_rng), int)

    def test_seeded_is_deterministic(self):
        """Verify identical seeds give identical delays."""
        a = compute_backoff_delay([300], 0, rng=random.Random(7))
        b = compute_backoff_delay([300], 0, rng=random.Random(7))
        assert a == b


# ===========================================================================
# classify_failure
# ===========================================================================


class TestClassifyFailure:
    """Tests for failure classification."""

    def test_timeout_error(self):
        """Verify builtin timeout exceptions classify as TIMEOUT."""
        assert classify_failure(TimeoutError()) == FailureKind.TIMEOUT
        assert classify_failure(asyncio.TimeoutError()) == FailureKind.TIMEOUT

    @pytest.mark.parametrize(
        "message",
        [
            "Request timed out.",
            "upstream timeout after 60s",
            "504 Gateway Timeout",
            "upstream returned HTTP 504",
            "status_code=504",
            "DEADLINE_EXCEEDED",
            "connect ETIMEDOUT 10.0.0.1:443",
        ],
    )
    def test_timeout_messages(self, message):
        """Verify timeout-like error messages classify as TIMEOUT."""
        assert classify_failure(RuntimeError(message)) == FailureKind.TIMEOUT

    @pytest.mark.parametrize(
        "message",
        [
            "429 rate limit exceeded",
            "401 invalid api key",
            "context_length_exceeded",
            "connection refused on port 15042",
            "request id req_55040 failed with 500",
        ],
    )
    def test_other_messages(self, message):
        """Verify other failures classify as OTHER."""
        assert classify_failure(RuntimeError(message)) == FailureKind.OTHER


# ===========================================================================
# decide_failover
# ===========================================================================


class TestDecideFailover:
    """Tests for the retry/rotate state machine."""

    def test_retries_first_timeout(self):
        """Verify the first timeout on a profile is retried with default config."""
        decision, state = decide_failover(
            FailureKind.TIMEOUT, "profile-a", FailoverState(), RetryPolicy()
        )
        assert decision.action == FailoverAction.RETRY
        assert decision.retry
        assert decision.delay_ms is not None and decision.delay_ms >= 300
        assert state.consecutive_timeouts == 1
        assert state.last_timeout_profile_id == "profile-a"
        assert state.last_profile_id == "profile-a"

    def test_rotates_after_retries_exhausted(self):
        """Verify the second consecutive timeout rotates with max_retries=1."""
        prior = FailoverState(
            last_profile_id="profile-a",
            last_timeout_profile_id="profile-a",
            consecutive_timeouts=1,
        )
        decision, state = decide_failover(FailureKind.TIMEOUT, "profile-a", prior, RetryPolicy())
        assert decision.action == FailoverAction.ROTATE
        assert decision.delay_ms is None
        assert state.consecutive_timeouts == 2
        assert state.last_timeout_profile_id == "profile-a"

    def test_two_timeouts_same_profile_sequence(self):
        """Verify retry then rotate across two timeouts on one profile."""
        policy = resolve_retry_policy(FailoverConfig(max_retries=1))
        first, state = decide_failover(FailureKind.TIMEOUT, "a", FailoverState(), policy)
        second, state = decide_failover(FailureKind.TIMEOUT, "a", state, policy)
        assert first.retry and first.delay_ms >= 300
        assert not second.retry
        assert state.consecutive_timeouts == 2

    def test_resets_on_different_profile(self):
        """Verify a timeout on a new profile starts a fresh count."""
        prior = FailoverState(
            last_profile_id="profile-a",
            last_timeout_profile_id="profile-a",
            consecutive_timeouts=5,
        )
        decision, state = decide_failover(FailureKind.TIMEOUT, "profile-b", prior, RetryPolicy())
        assert decision.retry
        assert state.consecutive_timeouts == 1
        assert state.last_timeout_profile_id == "profile-b"

    def test_resets_on_non_timeout(self):
        """Verify a non-timeout failure resets the counter and rotates."""
        prior = FailoverState(
            last_profile_id="profile-a",
            last_timeout_profile_id="profile-a",
            consecutive_timeouts=3,
        )
        decision, state = decide_failover(FailureKind.OTHER, "profile-a", prior, RetryPolicy())
        assert decision.action == FailoverAction.ROTATE
        assert state.consecutive_timeouts == 0

    def test_no_profile_id(self):
        """Verify a timeout without a profile ID is not retried."""
        decision, state = decide_failover(FailureKind.TIMEOUT, None, FailoverState(), RetryPolicy())
        assert not decision.retry
        assert state.consecutive_timeouts == 0

    def test_max_retries_zero(self):
        """Verify max_retries=0 never retries."""
        policy = resolve_retry_policy(FailoverConfig(max_retries=0))
        decision, state = decide_failover(FailureKind.TIMEOUT, "profile-a", FailoverState(), policy)
        assert not decision.retry
        assert state.consecutive_timeouts == 1

    def test_backoff_follows_schedule(self):
        """Verify successive retries use successive schedule entries."""
        policy = RetryPolicy(max_retries=3, backoff_schedule_ms=(100, 1000, 10000))
        rng = random.Random()
        rng.random = lambda: 0.0  # type: ignore[method-assign]
        state = FailoverState()
        delays = []
        for _ in range(3):
            decision, state = decide_failover(FailureKind.TIMEOUT, "p", state, policy, rng=rng)
            delays.append(decision.delay_ms)
        assert delays == [100, 1000, 10000]
        decision, state = decide_failover(FailureKind.TIMEOUT, "p", state, policy, rng=rng)
        assert not decision.retry
        assert state.consecutive_timeouts == 4

    def test_input_state_not_mutated(self):
        """Verify the prior state value is left unchanged."""
        prior = FailoverState()
        decide_failover(FailureKind.TIMEOUT, "p", prior, RetryPolicy())
        assert prior == FailoverState()


# ===========================================================================
# FailoverTracker
# ===========================================================================


class TestFailoverTracker:
    """Tests for the per-session tracker."""

    def test_classifies_exceptions(self):
        """Verify raw exceptions are classified before deciding."""
        tracker = FailoverTracker()
        decision = tracker.record_failure(TimeoutError("slow"), "a")
        assert decision.retry
        assert tracker.state.consecutive_timeouts == 1

    def test_sequence(self):
        """Verify retry, rotate, new-profile retry, then reset on other failure."""
        tracker = FailoverTracker(policy=RetryPolicy(max_retries=1))
        assert tracker.record_failure(FailureKind.TIMEOUT, "a").retry
        assert not tracker.record_failure(FailureKind.TIMEOUT, "a").retry
        assert tracker.state.consecutive_timeouts == 2
        assert tracker.record_failure(FailureKind.TIMEOUT, "b").retry
        assert tracker.state.consecutive_timeouts == 1
        assert not tracker.record_failure(FailureKind.OTHER, "b").retry
        assert tracker.state.consecutive_timeouts == 0

    def test_success_clears_counters(self):
        """Verify a success resets the timeout counters."""
        tracker = FailoverTracker()
        tracker.record_failure(FailureKind.TIMEOUT, "a")
        tracker.record_success("a")
        assert tracker.state == FailoverState(last_profile_id="a")
        assert tracker.record_failure(FailureKind.TIMEOUT, "a").retry

    def test_sessions_independent(self):
        """Verify two trackers do not share state."""
        one, two = FailoverTracker(), FailoverTracker()
        one.record_failure(FailureKind.TIMEOUT, "a")
        assert two.state == FailoverState()

    def test_reset(self):
        """Verify reset clears every counter."""
        tracker = FailoverTracker()
        tracker.record_failure(FailureKind.TIMEOUT, "a")
        tracker.reset()
        assert tracker.state == FailoverState()
