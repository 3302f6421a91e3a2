# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Model call loop with same-profile retry and profile rotation.

Profiles are tried in order.  After each failure the tracker decides:
  - retry  -> sleep for the advisory delay, call the same profile again
  - rotate -> move on to the next profile

``asyncio.CancelledError`` is not an ``Exception`` and passes straight
through, so cancelling the session task also cancels a pending backoff
sleep.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

from governor.errors import FailoverExhaustedError
from governor.services.failover.classifier import FailureKind, classify_failure
from governor.services.failover.controller import FailoverTracker
from governor.services.failover.policy import RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def call_with_failover(
    call: Callable[[str], Awaitable[T]],
    profiles: Sequence[str],
    *,
    tracker: Optional[FailoverTracker] = None,
    policy: Optional[RetryPolicy] = None,
    classify: Callable[[BaseException], FailureKind] = classify_failure,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Run ``call`` against ``profiles`` until one succeeds.

    Args:
        call (Callable[[str], Awaitable[T]]): Model call taking a profile ID.
        profiles (Sequence[str]): Profile IDs in preference order.
        tracker (Optional[FailoverTracker]): Session tracker. A fresh one
            built from ``policy`` is used when omitted.
        policy (Optional[RetryPolicy]): Policy for a fresh tracker. Must
            not be combined with ``tracker``, which carries its own policy.
        classify (Callable[[BaseException], FailureKind]): Failure classifier.
        sleep (Callable[[float], Awaitable[None]]): Sleep coroutine taking
            seconds.

    Returns:
        T: Result of the first successful call.

    Raises:
        ValueError: Both ``tracker`` and ``policy`` were given.
        FailoverExhaustedError: Every profile failed or ``profiles`` is empty.
    """
    if tracker is not None and policy is not None:
        raise ValueError("Pass either tracker or policy, not both")
    if tracker is None:
        tracker = FailoverTracker(policy=policy)

    attempted: List[str] = []
    last_error: Optional[Exception] = None

    for profile_id in profiles:
        attempted.append(profile_id)
        while True:
            try:
                result = await call(profile_id)
            except Exception as e:
                last_error = e
                decision = tracker.record_failure(classify(e), profile_id)
                if decision.retry and decision.delay_ms is not None:
                    await sleep(decision.delay_ms / 1000)
                    continue
                break
            tracker.record_success(profile_id)
            return result

    logger.error("Failover exhausted after profiles: %s", ", ".join(attempted) or "none")
    raise FailoverExhaustedError(attempted, last_error) from last_error
