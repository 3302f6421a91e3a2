# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Governor configuration using pydantic-settings.
"""

from typing import List, Optional

from governor.services.compaction.settings import (
    DEFAULT_COMPACTION_TARGET_RATIO,
    DEFAULT_FALLBACK_RETAIN_PERCENT,
    CompactionSettings,
)
from governor.services.failover.policy import FailoverConfig
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Governor settings.

    Attributes:
        CONTEXT_WINDOW_TOKENS (int): Model context window in tokens.
        COMPACTION_TARGET_TOKENS (Optional[int]): Explicit trim target.
        COMPACTION_TARGET_RATIO (float): Share of the context window used
            as the trim target when no explicit target is set.
        FALLBACK_RETAIN_PERCENT (float): Share of messages kept when the
            compaction step fails.
        FAILOVER_MAX_RETRIES (Optional[int]): Same-profile retries after a
            timeout. Unset means the default (1).
        FAILOVER_BACKOFF_SCHEDULE_MS (Optional[List[int]]): Retry base
            delays, JSON list in the environment. Unset means the default.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Compaction
    CONTEXT_WINDOW_TOKENS: int = 128_000
    COMPACTION_TARGET_TOKENS: Optional[int] = None
    COMPACTION_TARGET_RATIO: float = DEFAULT_COMPACTION_TARGET_RATIO
    FALLBACK_RETAIN_PERCENT: float = DEFAULT_FALLBACK_RETAIN_PERCENT

    # Failover
    FAILOVER_MAX_RETRIES: Optional[int] = None
    FAILOVER_BACKOFF_SCHEDULE_MS: Optional[List[int]] = None

    def compaction_settings(self) -> CompactionSettings:
        """Build the compaction layer's settings.

        Returns:
            CompactionSettings: Settings populated from this configuration.
        """
        return CompactionSettings(
            context_window_tokens=self.CONTEXT_WINDOW_TOKENS,
            target_tokens=self.COMPACTION_TARGET_TOKENS,
            target_ratio=self.COMPACTION_TARGET_RATIO,
            fallback_retain_percent=self.FALLBACK_RETAIN_PERCENT,
        )

    def failover_config(self) -> FailoverConfig:
        """Build the partial failover config; unset fields stay unset.

        Returns:
            FailoverConfig: Config ready for ``resolve_retry_policy``.
        """
        return FailoverConfig(
            max_retries=self.FAILOVER_MAX_RETRIES,
            backoff_schedule_ms=self.FAILOVER_BACKOFF_SCHEDULE_MS,
        )


settings = Settings()
