# Copyright (c) 2026 Heureum AI. All rights reserved.

"""Exceptions raised by the context governor."""

from typing import List, Optional


class GovernorError(Exception):
    """Base class for context governor errors."""


class FailoverExhaustedError(GovernorError):
    """Every model profile failed and no retry or rotation is left.

    Attributes:
        attempted_profiles (List[str]): Profiles tried, in order.
        last_error (Optional[BaseException]): Failure of the final attempt.
    """

    def __init__(
        self,
        attempted_profiles: List[str],
        last_error: Optional[BaseException] = None,
    ) -> None:
        self.attempted_profiles = list(attempted_profiles)
        self.last_error = last_error
        detail = f": {last_error}" if last_error is not None else ""
        super().__init__(
            f"All model profiles failed ({', '.join(self.attempted_profiles) or 'none'}){detail}"
        )
