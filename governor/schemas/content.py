# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Transcript content schemas.

Message content is either plain text or a list of typed content blocks.
Blocks are discriminated by their ``type`` field so that a transcript
round-trips through JSON without losing the block kind.
"""

from enum import Enum
from typing import Annotated, Any, Dict, Literal, Union

from pydantic import BaseModel, Field


class MessageRole(str, Enum):
    """Message role enumeration.

    Attributes:
        USER (str): User role.
        ASSISTANT (str): Assistant role.
        SYSTEM (str): System role.
        DEVELOPER (str): Developer role.
        TOOL (str): Tool result role.
    """

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    DEVELOPER = "developer"
    TOOL = "tool"


class TextBlock(BaseModel):
    """Plain text content block.

    Attributes:
        type (Literal["text"]): Content type discriminator.
        text (str): The text value.
    """

    type: Literal["text"] = "text"
    text: str


class ToolCallBlock(BaseModel):
    """A tool invocation emitted by the model.

    Attributes:
        type (Literal["tool_call"]): Content type discriminator.
        id (str): Correlation ID matched by the tool result.
        name (str): Name of the tool to invoke.
        arguments (Dict[str, Any]): Parsed arguments for the call.
    """

    type: Literal["tool_call"] = "tool_call"
    id: str
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)


class ToolResultBlock(BaseModel):
    """The result of a tool invocation.

    Attributes:
        type (Literal["tool_result"]): Content type discriminator.
        tool_call_id (str): Correlation ID of the originating call.
        output (str): Serialized tool output.
    """

    type: Literal["tool_result"] = "tool_result"
    tool_call_id: str
    output: str = ""


ContentBlock = Annotated[
    Union[TextBlock, ToolCallBlock, ToolResultBlock],
    Field(discriminator="type"),
]
