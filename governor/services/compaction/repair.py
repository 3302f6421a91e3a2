# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Tool call / tool result pairing repair.

Cutting a transcript can separate a tool call from its result.  Model
APIs reject both halves on their own: a result whose call is gone fails
with "unexpected tool_use_id", a call with no result fails with "tool_use
ids were found without tool_result blocks".

Repair is drop-only and order-preserving:
  1. A message with any tool call not answered by the run of result
     messages directly after it is dropped.  A result separated from its
     call by any other message does not count.
  2. A result whose call is not present earlier among surviving messages
     is dropped, as is a second result for an already answered call.

Pairing IDs are read from both message shapes (``tool_calls`` /
``tool_call_id`` and ``tool_call`` / ``tool_result`` content blocks).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Set

from governor.models import Message

logger = logging.getLogger(__name__)


@dataclass
class RepairReport:
    """Result of a repair pass.

    Attributes:
        messages (List[Message]): The repaired message list.
        dropped_unanswered_count (int): Messages dropped because a tool call
            they carry has no result.
        dropped_orphan_count (int): Messages dropped because a tool result
            they carry has no call.
    """

    messages: List[Message]
    dropped_unanswered_count: int = 0
    dropped_orphan_count: int = 0

    @property
    def dropped_count(self) -> int:
        """Total number of dropped messages."""
        return self.dropped_unanswered_count + self.dropped_orphan_count


def _adjacent_result_ids(messages: List[Message], index: int) -> Set[str]:
    """Result IDs carried by the run of result messages right after ``index``."""
    ids: Set[str] = set()
    for msg in messages[index + 1 :]:
        result_ids = msg.tool_result_ids()
        if not result_ids:
            break
        ids.update(result_ids)
        if msg.tool_call_ids():
            break
    return ids


def _drop_unanswered_calls(messages: List[Message]) -> tuple[List[Message], int]:
    kept: List[Message] = []
    dropped = 0

    for i, msg in enumerate(messages):
        call_ids = msg.tool_call_ids()
        if call_ids:
            answered = _adjacent_result_ids(messages, i)
            if any(tc_id not in answered for tc_id in call_ids):
                logger.info("Dropped unanswered tool call message: tool_call_ids=%s", call_ids)
                dropped += 1
                continue
        kept.append(msg)

    return kept, dropped


def _drop_orphan_results(messages: List[Message]) -> tuple[List[Message], int]:
    issued: Set[str] = set()
    answered: Set[str] = set()
    kept: List[Message] = []
    dropped = 0

    for msg in messages:
        result_ids = msg.tool_result_ids()
        if result_ids and any(tc_id not in issued or tc_id in answered for tc_id in result_ids):
            logger.info("Dropped orphaned tool_result: tool_call_ids=%s", result_ids)
            dropped += 1
            continue
        issued.update(msg.tool_call_ids())
        answered.update(result_ids)
        kept.append(msg)

    return kept, dropped


def repair_tool_use_result_pairing(messages: List[Message]) -> RepairReport:
    """Drop messages that would leave a tool call or result unpaired.

    Args:
        messages (List[Message]): Conversation message list to scan and repair.

    Returns:
        RepairReport: The cleaned message list and drop counters.
    """
    if not messages:
        return RepairReport(messages=list(messages))

    has_tool_traffic = any(m.tool_call_ids() or m.tool_result_ids() for m in messages)
    if not has_tool_traffic:
        return RepairReport(messages=list(messages))

    # A block message can carry several results; dropping it for one orphan
    # can strand another call, so repeat until nothing changes.
    kept = list(messages)
    unanswered = orphans = 0
    while True:
        kept, n_unanswered = _drop_unanswered_calls(kept)
        kept, n_orphans = _drop_orphan_results(kept)
        unanswered += n_unanswered
        orphans += n_orphans
        if not n_unanswered and not n_orphans:
            break

    report = RepairReport(
        messages=kept,
        dropped_unanswered_count=unanswered,
        dropped_orphan_count=orphans,
    )
    if report.dropped_count:
        logger.info(
            "Repaired tool call/result pairing: dropped %d unanswered, %d orphaned",
            unanswered,
            orphans,
        )
    return report


def sanitize_pairs(messages: List[Message]) -> List[Message]:
    """Plain sanitizer callable used as the default collaborator.

    Args:
        messages (List[Message]): Messages to repair.

    Returns:
        List[Message]: Messages with unpaired tool traffic removed.
    """
    return repair_tool_use_result_pairing(messages).messages
