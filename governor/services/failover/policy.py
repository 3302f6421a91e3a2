# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Retry policy resolution.

Defaults are applied field by field: an explicit ``max_retries=0``
disables same-profile retries, while an unset value falls back to 1.
Likewise the default schedule applies only when the field is absent; an
explicit empty schedule is kept and the backoff floor applies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, PositiveInt

DEFAULT_MAX_RETRIES = 1
DEFAULT_BACKOFF_SCHEDULE_MS: Tuple[int, ...] = (300, 1200)


class FailoverConfig(BaseModel):
    """Partial failover configuration as supplied by the caller.

    Attributes:
        max_retries (Optional[int]): Same-profile retries allowed after a
            timeout. ``None`` means unset.
        backoff_schedule_ms (Optional[List[int]]): Base delay per retry
            attempt in milliseconds. ``None`` means unset.
    """

    max_retries: Optional[int] = Field(default=None, ge=0)
    backoff_schedule_ms: Optional[List[PositiveInt]] = None


@dataclass(frozen=True)
class RetryPolicy:
    """Effective retry policy.

    Attributes:
        max_retries (int): Same-profile retries allowed after a timeout.
        backoff_schedule_ms (Tuple[int, ...]): Base delay per attempt.
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    backoff_schedule_ms: Tuple[int, ...] = DEFAULT_BACKOFF_SCHEDULE_MS


def resolve_retry_policy(config: Optional[FailoverConfig] = None) -> RetryPolicy:
    """Merge a partial config with the defaults.

    Args:
        config (Optional[FailoverConfig]): Caller configuration, possibly
            ``None`` or with unset fields.

    Returns:
        RetryPolicy: Fully populated policy.
    """
    if config is None:
        return RetryPolicy()

    max_retries = config.max_retries if config.max_retries is not None else DEFAULT_MAX_RETRIES
    schedule = (
        tuple(config.backoff_schedule_ms)
        if config.backoff_schedule_ms is not None
        else DEFAULT_BACKOFF_SCHEDULE_MS
    )
    return RetryPolicy(max_retries=max_retries, backoff_schedule_ms=schedule)
