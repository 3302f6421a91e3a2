# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Shared test fixtures for the context governor test suite."""

import random
from typing import Any, Dict, List, Optional, Union

import pytest
from governor.models import Message
from governor.schemas.content import ContentBlock, MessageRole


# ---------------------------------------------------------------------------
# Message factories
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_message():
    """Factory fixture for creating Message instances."""

    def _factory(
        role: MessageRole = MessageRole.USER,
        content: Union[str, List[ContentBlock]] = "hello",
        tool_call_id: Optional[str] = None,
        tool_calls: Optional[List[Dict[str, Any]]] = None,
    ) -> Message:
        return Message(
            role=role,
            content=content,
            tool_call_id=tool_call_id,
            tool_calls=tool_calls,
        )

    return _factory


# ---------------------------------------------------------------------------
# Jitter
# ---------------------------------------------------------------------------


@pytest.fixture
def seeded_rng():
    """Deterministic random source for backoff jitter."""
    return random.Random(1234)
