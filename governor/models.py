# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Shared models for the context governor."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from governor.schemas.content import (
    ContentBlock,
    MessageRole,
    TextBlock,
    ToolCallBlock,
    ToolResultBlock,
)
from pydantic import BaseModel


class Message(BaseModel):
    """Message model.

    ``content`` is either plain text or a list of typed content blocks.
    Callers should read it through ``text`` / ``text_length`` and the
    tool id helpers instead of branching on the shape themselves.

    Attributes:
        role (MessageRole): The role of the message sender.
        content (Union[str, List[ContentBlock]]): Plain text or content blocks.
        tool_call_id (Optional[str]): Identifier linking a tool-role message
            to the tool call it answers.
        tool_calls (Optional[List[Dict[str, Any]]]): Tool call descriptors
            emitted by the model (each carries an ``id`` key).
        tool_name (Optional[str]): Name of the tool that produced this result
            (tool-role messages only).
    """

    role: MessageRole
    content: Union[str, List[ContentBlock]] = ""
    tool_call_id: Optional[str] = None
    tool_calls: Optional[List[Dict[str, Any]]] = None
    tool_name: Optional[str] = None

    @property
    def text(self) -> str:
        """Text carried by the message, block texts joined by newlines.

        Tool call blocks contribute nothing here; their arguments are
        counted separately by the token estimator.
        """
        if isinstance(self.content, str):
            return self.content
        parts: List[str] = []
        for block in self.content:
            if isinstance(block, TextBlock):
                parts.append(block.text)
            elif isinstance(block, ToolResultBlock):
                parts.append(block.output)
        return "\n".join(parts)

    @property
    def text_length(self) -> int:
        """Total text length of the content, whatever its shape."""
        return len(self.text)

    def tool_call_ids(self) -> List[str]:
        """IDs of every tool call this message issues, in order.

        Returns:
            List[str]: IDs from ``tool_calls`` followed by IDs of
                ``tool_call`` content blocks.
        """
        ids: List[str] = []
        for tc in self.tool_calls or []:
            tc_id = tc.get("id")
            if tc_id:
                ids.append(tc_id)
        if not isinstance(self.content, str):
            ids.extend(b.id for b in self.content if isinstance(b, ToolCallBlock))
        return ids

    def tool_result_ids(self) -> List[str]:
        """IDs of every tool call this message answers, in order.

        Returns:
            List[str]: ``tool_call_id`` of a tool-role message followed by
                IDs of ``tool_result`` content blocks.
        """
        ids: List[str] = []
        if self.role == MessageRole.TOOL and self.tool_call_id:
            ids.append(self.tool_call_id)
        if not isinstance(self.content, str):
            ids.extend(b.tool_call_id for b in self.content if isinstance(b, ToolResultBlock))
        return ids


@dataclass
class TrimResult:
    """Outcome of a token-budget trim.

    Attributes:
        trimmed (List[Message]): Pinned message followed by the newest
            messages that fit, after pair repair.
        tokens_after (int): Estimated tokens of ``trimmed``.
    """

    trimmed: List[Message]
    tokens_after: int


@dataclass
class FallbackResult:
    """Outcome of size-based fallback compaction.

    Attributes:
        messages (List[Message]): Retained newest messages, after pair repair.
        tokens_after (int): Estimated tokens of ``messages``.
    """

    messages: List[Message]
    tokens_after: int


class CompactionStrategy(str, Enum):
    """Which path produced a compaction outcome.

    Attributes:
        NOOP (str): Nothing to do (empty transcript).
        COMPACTED (str): Compaction step output already fit the budget.
        TRIMMED (str): Compaction step output was trimmed to the budget.
        FALLBACK (str): Compaction step failed; size-based fallback used.
    """

    NOOP = "noop"
    COMPACTED = "compacted"
    TRIMMED = "trimmed"
    FALLBACK = "fallback"


@dataclass
class CompactionOutcome:
    """Result of running the compaction pipeline once.

    Attributes:
        messages (List[Message]): Transcript to feed the next model call.
        tokens_before (int): Estimated tokens of the input transcript.
        tokens_after (int): Estimated tokens of ``messages``.
        strategy (CompactionStrategy): Path that produced ``messages``.
    """

    messages: List[Message]
    tokens_before: int
    tokens_after: int
    strategy: CompactionStrategy
