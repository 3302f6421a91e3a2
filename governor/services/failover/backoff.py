# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Jittered backoff delay for same-profile retries."""

from __future__ import annotations

import math
import random
from typing import Optional, Sequence

BACKOFF_FLOOR_MS = 300
JITTER_RATIO = 0.3


def compute_backoff_delay(
    schedule_ms: Sequence[int],
    attempt_index: int,
    *,
    rng: Optional[random.Random] = None,
) -> int:
    """Delay before retry number ``attempt_index`` (0-based).

    The base delay is the schedule entry for the attempt, clamped to the
    last entry, or ``BACKOFF_FLOOR_MS`` for an empty schedule.  Up to 30%
    jitter is added, so the result lies in ``[base, 1.3 * base)``.

    Args:
        schedule_ms (Sequence[int]): Base delays in milliseconds.
        attempt_index (int): Retry attempt, 0 for the first retry.
        rng (Optional[random.Random]): Random source. Defaults to the
            module-level generator.

    Returns:
        int: Delay in milliseconds.
    """
    if schedule_ms:
        index = min(max(attempt_index, 0), len(schedule_ms) - 1)
        base = schedule_ms[index]
    else:
        base = BACKOFF_FLOOR_MS

    jitter = (rng or random).random() * JITTER_RATIO * base
    return math.floor(base + jitter)
