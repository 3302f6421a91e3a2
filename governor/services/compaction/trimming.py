# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Post-compaction trimming and size-based fallback compaction.

``trim_to_target_tokens`` runs after the compaction step and enforces a
hard token ceiling.  The first message (normally the compaction summary)
is pinned; the newest messages that fit are kept.

``fallback_compact`` runs instead when the compaction step itself fails.
It ignores token weight and keeps a fixed share of the newest messages,
which always terminates and always shrinks the transcript.

Both pass their output through the pair sanitizer and re-measure it,
since sanitizing can drop further messages.  Neither has an error path
of its own; estimator and sanitizer errors propagate to the caller.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, List, Optional

from governor.models import FallbackResult, Message, TrimResult
from governor.services.compaction.repair import sanitize_pairs
from governor.services.compaction.settings import (
    DEFAULT_FALLBACK_RETAIN_PERCENT,
    MAX_FALLBACK_RETAIN_PERCENT,
    MIN_FALLBACK_RETAIN_PERCENT,
)
from governor.services.compaction.tokens import estimate_message_tokens

logger = logging.getLogger(__name__)

Estimator = Callable[[Message], int]
Sanitizer = Callable[[List[Message]], List[Message]]


def _total_tokens(messages: List[Message], estimate: Estimator) -> int:
    return sum(estimate(m) for m in messages)


def trim_to_target_tokens(
    messages: List[Message],
    target_tokens: int,
    *,
    estimate: Estimator = estimate_message_tokens,
    sanitize: Sanitizer = sanitize_pairs,
) -> Optional[TrimResult]:
    """Drop the oldest messages until the transcript fits ``target_tokens``.

    Message 0 is always kept.  Walking back from the newest message,
    messages are collected while ``pinned + collected + next`` stays
    within the target; the walk stops at the first message that does not
    fit, even if an older one would.

    Args:
        messages (List[Message]): Transcript, summary first.
        target_tokens (int): Token ceiling.
        estimate (Estimator): Per-message token estimator.
        sanitize (Sanitizer): Tool pairing repair applied to the result.

    Returns:
        Optional[TrimResult]: ``None`` when the transcript is empty or
            already within the target, otherwise the trimmed transcript
            and its re-estimated token count.
    """
    if not messages:
        return None

    per_message = [estimate(m) for m in messages]
    total = sum(per_message)
    if total <= target_tokens:
        return None

    pinned_tokens = per_message[0]
    candidates: List[Message] = []
    candidate_tokens = 0
    for i in range(len(messages) - 1, 0, -1):
        if pinned_tokens + candidate_tokens + per_message[i] > target_tokens:
            break
        candidates.append(messages[i])
        candidate_tokens += per_message[i]

    candidates.reverse()
    kept = [messages[0], *candidates]

    repaired = sanitize(kept)
    tokens_after = _total_tokens(repaired, estimate)

    logger.info(
        "Trimmed transcript to target: %d -> %d messages, %d -> %d tokens (target %d)",
        len(messages),
        len(repaired),
        total,
        tokens_after,
        target_tokens,
    )
    return TrimResult(trimmed=repaired, tokens_after=tokens_after)


def clamp_retain_percent(retain_percent: float) -> float:
    """Clamp ``retain_percent`` into ``[0.05, 1.0]``."""
    return max(MIN_FALLBACK_RETAIN_PERCENT, min(MAX_FALLBACK_RETAIN_PERCENT, retain_percent))


def fallback_compact(
    messages: List[Message],
    retain_percent: float = DEFAULT_FALLBACK_RETAIN_PERCENT,
    *,
    estimate: Estimator = estimate_message_tokens,
    sanitize: Sanitizer = sanitize_pairs,
) -> FallbackResult:
    """Keep only the newest ``retain_percent`` share of messages.

    Args:
        messages (List[Message]): Pre-compaction transcript.
        retain_percent (float): Share of messages to keep, clamped to
            ``[0.05, 1.0]``. Defaults to 0.2.
        estimate (Estimator): Per-message token estimator.
        sanitize (Sanitizer): Tool pairing repair applied to the result.

    Returns:
        FallbackResult: The retained suffix (after repair) and its token
            count. Empty input yields an empty result with zero tokens.
    """
    if not messages:
        return FallbackResult(messages=[], tokens_after=0)

    clamped = clamp_retain_percent(retain_percent)
    retain_count = max(1, math.ceil(len(messages) * clamped))
    retained = messages[-retain_count:]

    repaired = sanitize(retained)
    tokens_after = _total_tokens(repaired, estimate)

    logger.warning(
        "Fallback compaction kept %d of %d messages (retain %.2f), %d tokens",
        len(repaired),
        len(messages),
        clamped,
        tokens_after,
    )
    return FallbackResult(messages=repaired, tokens_after=tokens_after)
