# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Compaction settings.

The trim target is expressed either as an absolute token count or as a
ratio of the context window.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# Share of the context window used as the trim target when no explicit
# target is configured.
DEFAULT_COMPACTION_TARGET_RATIO = 0.25

# Share of messages kept by the fallback compactor.
DEFAULT_FALLBACK_RETAIN_PERCENT = 0.2
MIN_FALLBACK_RETAIN_PERCENT = 0.05
MAX_FALLBACK_RETAIN_PERCENT = 1.0


@dataclass
class CompactionSettings:
    """All compaction-related configuration in one place.

    Attributes:
        context_window_tokens (int): Maximum context window size in tokens.
        target_tokens (Optional[int]): Explicit token ceiling for the trimmer.
            When ``None`` the ceiling is derived from ``target_ratio``.
        target_ratio (float): Share of the context window used as the
            ceiling when ``target_tokens`` is unset.
        fallback_retain_percent (float): Share of messages the fallback
            compactor keeps when the compaction step fails.
    """

    context_window_tokens: int = 128_000
    target_tokens: Optional[int] = None
    target_ratio: float = DEFAULT_COMPACTION_TARGET_RATIO
    fallback_retain_percent: float = DEFAULT_FALLBACK_RETAIN_PERCENT

    @property
    def resolved_target_tokens(self) -> int:
        """Token ceiling handed to the trimmer.

        Returns:
            int: ``target_tokens`` when set, otherwise
                ``int(context_window_tokens * target_ratio)``.
        """
        if self.target_tokens is not None:
            return self.target_tokens
        return int(self.context_window_tokens * self.target_ratio)
