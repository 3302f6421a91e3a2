# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Model call failure classification."""

from __future__ import annotations

import asyncio
import re
from enum import Enum

_TIMEOUT_PATTERNS = (
    "timed out",
    "timeout",
    "deadline exceeded",
    "deadline_exceeded",
    "gateway timeout",
    "etimedout",
    "esockettimedout",
)

# HTTP 504 only as a standalone number, not inside IDs or ports.
_GATEWAY_TIMEOUT_STATUS = re.compile(r"\b504\b")


class FailureKind(str, Enum):
    """Failure classes the failover controller distinguishes.

    Attributes:
        TIMEOUT (str): The call timed out; the same profile may be retried.
        OTHER (str): Any other failure; the caller rotates or surfaces it.
    """

    TIMEOUT = "timeout"
    OTHER = "other"


def classify_failure(error: BaseException) -> FailureKind:
    """Classify a model call exception.

    Args:
        error (BaseException): The exception raised by the call.

    Returns:
        FailureKind: ``TIMEOUT`` for timeout exceptions or errors whose
            message matches a known timeout pattern, else ``OTHER``.
    """
    if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return FailureKind.TIMEOUT
    msg = str(error).lower()
    if any(s in msg for s in _TIMEOUT_PATTERNS):
        return FailureKind.TIMEOUT
    if _GATEWAY_TIMEOUT_STATUS.search(msg):
        return FailureKind.TIMEOUT
    return FailureKind.OTHER
