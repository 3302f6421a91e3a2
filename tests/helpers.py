# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Deterministic collaborator fakes shared by the tests."""

import math
from typing import List

from governor.models import Message


def chars_over_four(msg: Message) -> int:
    """Deterministic estimator: ceil(text length / 4), at least 1."""
    return max(1, math.ceil(msg.text_length / 4))


def passthrough(messages: List[Message]) -> List[Message]:
    """Sanitizer that keeps every message."""
    return list(messages)
