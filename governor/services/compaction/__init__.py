# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Context compaction module.

Keeps a session transcript within its token budget without breaking
tool call / tool result pairing:

  Trimming  (trimming.py)
      After the compaction step, pin the summary message and keep the
      newest messages that fit the token target.

  Fallback  (trimming.py)
      When the compaction step fails, keep a fixed share of the newest
      messages regardless of token weight.

  Repair  (repair.py)
      Drop unpaired tool calls and tool results after any cut.

  Pipeline  (pipeline.py)
      Compaction step -> trim, or fallback on failure.

Usage:

    settings = CompactionSettings(context_window_tokens=128_000)

    outcome = await compact_within_budget(messages, summarize, settings)
    messages = outcome.messages
"""

from governor.services.compaction.pipeline import compact_within_budget
from governor.services.compaction.repair import (
    RepairReport,
    repair_tool_use_result_pairing,
    sanitize_pairs,
)
from governor.services.compaction.settings import (
    DEFAULT_COMPACTION_TARGET_RATIO,
    DEFAULT_FALLBACK_RETAIN_PERCENT,
    CompactionSettings,
)
from governor.services.compaction.tokens import (
    estimate_message_chars,
    estimate_message_tokens,
    estimate_messages_tokens,
    estimate_tokens,
)
from governor.services.compaction.trimming import (
    clamp_retain_percent,
    fallback_compact,
    trim_to_target_tokens,
)

__all__ = [
    "CompactionSettings",
    "DEFAULT_COMPACTION_TARGET_RATIO",
    "DEFAULT_FALLBACK_RETAIN_PERCENT",
    "estimate_tokens",
    "estimate_message_tokens",
    "estimate_messages_tokens",
    "estimate_message_chars",
    "repair_tool_use_result_pairing",
    "sanitize_pairs",
    "RepairReport",
    "trim_to_target_tokens",
    "fallback_compact",
    "clamp_retain_percent",
    "compact_within_budget",
]
