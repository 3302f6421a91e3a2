# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Token and character estimation utilities.

Uses the tiktoken ``o200k_base`` encoding when it can be loaded, falls
back to a chars/4 heuristic otherwise (the encoding's BPE file is fetched
on first use, which fails on offline hosts).

Tool-call arguments are included in the estimate: each tool call,
whether carried in ``tool_calls`` or as a ``tool_call`` content block,
is serialised to JSON and the JSON text itself is tokenized.
"""

from __future__ import annotations

import json
import logging
import math
from functools import lru_cache
from typing import Any, List, Optional

import tiktoken
from governor.models import Message
from governor.schemas.content import ToolCallBlock

TOOL_CALL_FALLBACK_CHARS = 128
CHARS_PER_TOKEN_FALLBACK = 4
ENCODING_NAME = "o200k_base"

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _get_encoding() -> Optional[Any]:
    """Load the tiktoken encoding once; ``None`` when unavailable."""
    try:
        return tiktoken.get_encoding(ENCODING_NAME)
    except Exception as e:
        logger.info(
            "tiktoken encoding %s unavailable (%s), using chars/%d heuristic",
            ENCODING_NAME,
            e,
            CHARS_PER_TOKEN_FALLBACK,
        )
        return None


def estimate_tokens_heuristic(text: str) -> int:
    """Estimate token count using the character heuristic.

    Args:
        text (str): Text to estimate tokens for.

    Returns:
        int: ``ceil(len(text) / CHARS_PER_TOKEN_FALLBACK)``, at least 1.
    """
    return max(1, math.ceil(len(text) / CHARS_PER_TOKEN_FALLBACK))


def estimate_tokens(text: str) -> int:
    """Estimate token count for a piece of text.

    Args:
        text (str): Text to tokenize.

    Returns:
        int: Number of tokens produced by the tiktoken encoder, or the
            heuristic estimate when the encoder is unavailable.
    """
    encoding = _get_encoding()
    if encoding is None:
        return estimate_tokens_heuristic(text)
    return len(encoding.encode(text, disallowed_special=()))


def _tool_calls_json(msg: Message) -> List[str]:
    """Serialised tool call metadata carried by a message.

    Args:
        msg (Message): Message whose tool calls to serialise.

    Returns:
        List[str]: One JSON string per tool call, in order. A call that
            cannot be serialised is represented by a placeholder of
            ``TOOL_CALL_FALLBACK_CHARS`` characters.
    """
    calls: List[Any] = list(msg.tool_calls or [])
    if not isinstance(msg.content, str):
        calls.extend(
            b.model_dump(exclude={"type"}) for b in msg.content if isinstance(b, ToolCallBlock)
        )
    serialised: List[str] = []
    for tc in calls:
        try:
            serialised.append(json.dumps(tc, ensure_ascii=False))
        except (TypeError, ValueError):
            serialised.append("x" * TOOL_CALL_FALLBACK_CHARS)
    return serialised


def _tool_calls_chars(msg: Message) -> int:
    """Extra characters contributed by tool call metadata."""
    return sum(len(s) for s in _tool_calls_json(msg))


def estimate_message_tokens(msg: Message) -> int:
    """Estimate token count for a single message.

    Includes both the message text and serialised tool calls (if any).

    Args:
        msg (Message): Message to estimate tokens for.

    Returns:
        int: Estimated token count of the message text plus tool calls.
    """
    calls = _tool_calls_json(msg)
    if calls:
        return estimate_tokens(msg.text) + estimate_tokens("".join(calls))
    return estimate_tokens(msg.text)


def estimate_messages_tokens(messages: List[Message]) -> int:
    """Estimate total token count for a list of messages.

    Args:
        messages (List[Message]): Messages to estimate tokens for.

    Returns:
        int: Sum of estimated token counts across all messages.
    """
    return sum(estimate_message_tokens(m) for m in messages)


def estimate_message_chars(msg: Message) -> int:
    """Character count for a single message including tool calls."""
    return msg.text_length + _tool_calls_chars(msg)
