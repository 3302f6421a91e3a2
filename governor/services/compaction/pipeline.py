# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Compaction pipeline: compaction step, then budget enforcement.

  1. Await the compaction step (typically LLM summarization producing a
     summary message at index 0).
  2. Trim its output to the token target, pinning the summary.
  3. If the compaction step raises, fall back to size-based retention
     on the pre-compaction transcript.

The compaction step is supplied by the caller; this module never talks
to a model.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, List

from governor.models import CompactionOutcome, CompactionStrategy, Message
from governor.services.compaction.repair import sanitize_pairs
from governor.services.compaction.settings import CompactionSettings
from governor.services.compaction.tokens import estimate_message_tokens
from governor.services.compaction.trimming import (
    Estimator,
    Sanitizer,
    fallback_compact,
    trim_to_target_tokens,
)

logger = logging.getLogger(__name__)

CompactionStep = Callable[[List[Message]], Awaitable[List[Message]]]


async def compact_within_budget(
    messages: List[Message],
    compact: CompactionStep,
    settings: CompactionSettings,
    *,
    estimate: Estimator = estimate_message_tokens,
    sanitize: Sanitizer = sanitize_pairs,
) -> CompactionOutcome:
    """Compact a transcript and enforce the token target on the result.

    Args:
        messages (List[Message]): Pre-compaction transcript.
        compact (CompactionStep): Async compaction step returning a
            candidate transcript, summary first.
        settings (CompactionSettings): Target and fallback configuration.
        estimate (Estimator): Per-message token estimator.
        sanitize (Sanitizer): Tool pairing repair.

    Returns:
        CompactionOutcome: Transcript for the next model call, with token
            counts and the strategy that produced it.
    """
    if not messages:
        return CompactionOutcome(
            messages=[],
            tokens_before=0,
            tokens_after=0,
            strategy=CompactionStrategy.NOOP,
        )

    tokens_before = sum(estimate(m) for m in messages)

    try:
        candidate = await compact(messages)
    except Exception as e:
        logger.warning("Compaction step failed, using fallback retention: %s", e)
        fallback = fallback_compact(
            messages,
            settings.fallback_retain_percent,
            estimate=estimate,
            sanitize=sanitize,
        )
        return CompactionOutcome(
            messages=fallback.messages,
            tokens_before=tokens_before,
            tokens_after=fallback.tokens_after,
            strategy=CompactionStrategy.FALLBACK,
        )

    target = settings.resolved_target_tokens
    trimmed = trim_to_target_tokens(candidate, target, estimate=estimate, sanitize=sanitize)
    if trimmed is None:
        repaired = sanitize(candidate)
        tokens_after = sum(estimate(m) for m in repaired)
        logger.info(
            "Compaction fits target: %d -> %d tokens (target %d)",
            tokens_before,
            tokens_after,
            target,
        )
        return CompactionOutcome(
            messages=repaired,
            tokens_before=tokens_before,
            tokens_after=tokens_after,
            strategy=CompactionStrategy.COMPACTED,
        )

    return CompactionOutcome(
        messages=trimmed.trimmed,
        tokens_before=tokens_before,
        tokens_after=trimmed.tokens_after,
        strategy=CompactionStrategy.TRIMMED,
    )
