# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Retry-same-profile vs rotate decision after a model call failure.

``decide_failover`` is a pure function of the failure, the failed
profile, the prior ``FailoverState`` and the ``RetryPolicy``; it returns
the decision together with the next state.  Only a timeout on an
identified profile can be retried, and only ``max_retries`` times in a
row on that profile.  A timeout on a different profile starts a fresh
count.

``FailoverTracker`` owns one session's state and applies each outcome
as a single read-modify-write step.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from governor.services.failover.backoff import compute_backoff_delay
from governor.services.failover.classifier import FailureKind, classify_failure
from governor.services.failover.policy import RetryPolicy

logger = logging.getLogger(__name__)


class FailoverAction(str, Enum):
    """What the caller should do next.

    Attributes:
        RETRY (str): Call the same profile again after ``delay_ms``.
        ROTATE (str): Do not retry this profile; pick another or give up.
    """

    RETRY = "retry"
    ROTATE = "rotate"


@dataclass(frozen=True)
class FailoverDecision:
    """Decision returned for one failure.

    Attributes:
        action (FailoverAction): Retry the same profile or rotate.
        delay_ms (Optional[int]): Advisory wait before the retry; set only
            for ``RETRY``.
    """

    action: FailoverAction
    delay_ms: Optional[int] = None

    @property
    def retry(self) -> bool:
        """Whether the same profile should be retried."""
        return self.action == FailoverAction.RETRY


@dataclass(frozen=True)
class FailoverState:
    """Per-session failure counters.

    Attributes:
        last_profile_id (Optional[str]): Profile of the latest call outcome.
        last_timeout_profile_id (Optional[str]): Profile of the latest timeout.
        consecutive_timeouts (int): Timeouts in a row on
            ``last_timeout_profile_id``.
    """

    last_profile_id: Optional[str] = None
    last_timeout_profile_id: Optional[str] = None
    consecutive_timeouts: int = 0


def decide_failover(
    failure: FailureKind,
    failed_profile_id: Optional[str],
    state: FailoverState,
    policy: RetryPolicy,
    *,
    rng: Optional[random.Random] = None,
) -> Tuple[FailoverDecision, FailoverState]:
    """Decide whether to retry the failed profile or rotate away from it.

    Args:
        failure (FailureKind): Classification of the failure.
        failed_profile_id (Optional[str]): Profile the call used, if known.
        state (FailoverState): Counters before this failure.
        policy (RetryPolicy): Effective retry policy.
        rng (Optional[random.Random]): Random source for backoff jitter.

    Returns:
        Tuple[FailoverDecision, FailoverState]: The decision and the
            counters after this failure.
    """
    if failure != FailureKind.TIMEOUT or not failed_profile_id:
        next_state = FailoverState(
            last_profile_id=failed_profile_id,
            last_timeout_profile_id=state.last_timeout_profile_id,
            consecutive_timeouts=0,
        )
        return FailoverDecision(action=FailoverAction.ROTATE), next_state

    if failed_profile_id == state.last_timeout_profile_id:
        consecutive = state.consecutive_timeouts + 1
    else:
        consecutive = 1

    next_state = FailoverState(
        last_profile_id=failed_profile_id,
        last_timeout_profile_id=failed_profile_id,
        consecutive_timeouts=consecutive,
    )

    if consecutive <= policy.max_retries:
        delay_ms = compute_backoff_delay(policy.backoff_schedule_ms, consecutive - 1, rng=rng)
        return FailoverDecision(action=FailoverAction.RETRY, delay_ms=delay_ms), next_state

    return FailoverDecision(action=FailoverAction.ROTATE), next_state


class FailoverTracker:
    """Holds one session's ``FailoverState``.

    Not shared across sessions; each session loop creates its own.
    """

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        state: Optional[FailoverState] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.policy = policy or RetryPolicy()
        self.state = state or FailoverState()
        self._rng = rng

    def record_failure(
        self,
        failure: Union[FailureKind, BaseException],
        profile_id: Optional[str],
    ) -> FailoverDecision:
        """Apply a failed call outcome and return the decision.

        Args:
            failure (Union[FailureKind, BaseException]): Classification, or
                the raised exception to classify.
            profile_id (Optional[str]): Profile the call used.

        Returns:
            FailoverDecision: Retry the same profile or rotate.
        """
        kind = failure if isinstance(failure, FailureKind) else classify_failure(failure)
        decision, self.state = decide_failover(
            kind, profile_id, self.state, self.policy, rng=self._rng
        )
        if decision.retry:
            logger.warning(
                "Timeout on profile %s (%d/%d), retrying in %dms",
                profile_id,
                self.state.consecutive_timeouts,
                self.policy.max_retries,
                decision.delay_ms,
            )
        else:
            logger.warning(
                "Rotating away from profile %s after %s failure (consecutive timeouts: %d)",
                profile_id,
                kind.value,
                self.state.consecutive_timeouts,
            )
        return decision

    def record_success(self, profile_id: Optional[str]) -> None:
        """Apply a successful call outcome; clears the timeout counters."""
        self.state = FailoverState(last_profile_id=profile_id)

    def reset(self) -> None:
        """Forget all counters."""
        self.state = FailoverState()
