# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Schemas for transcript content."""
from .content import (
    ContentBlock,
    MessageRole,
    TextBlock,
    ToolCallBlock,
    ToolResultBlock,
)

__all__ = [
    "ContentBlock",
    "MessageRole",
    "TextBlock",
    "ToolCallBlock",
    "ToolResultBlock",
]
