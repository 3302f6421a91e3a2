# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Model failover module.

  Policy      (policy.py)      partial config -> RetryPolicy
  Backoff     (backoff.py)     attempt index -> jittered delay
  Classifier  (classifier.py)  exception -> timeout / other
  Controller  (controller.py)  failure + state -> retry / rotate
  Runner      (runner.py)      async call loop across profiles

Usage:

    tracker = FailoverTracker(policy=resolve_retry_policy(config))
    result = await call_with_failover(invoke_model, ["primary", "backup"], tracker=tracker)
"""

from governor.services.failover.backoff import compute_backoff_delay
from governor.services.failover.classifier import FailureKind, classify_failure
from governor.services.failover.controller import (
    FailoverAction,
    FailoverDecision,
    FailoverState,
    FailoverTracker,
    decide_failover,
)
from governor.services.failover.policy import (
    DEFAULT_BACKOFF_SCHEDULE_MS,
    DEFAULT_MAX_RETRIES,
    FailoverConfig,
    RetryPolicy,
    resolve_retry_policy,
)
from governor.services.failover.runner import call_with_failover

__all__ = [
    "DEFAULT_BACKOFF_SCHEDULE_MS",
    "DEFAULT_MAX_RETRIES",
    "FailoverConfig",
    "RetryPolicy",
    "resolve_retry_policy",
    "compute_backoff_delay",
    "FailureKind",
    "classify_failure",
    "FailoverAction",
    "FailoverDecision",
    "FailoverState",
    "FailoverTracker",
    "decide_failover",
    "call_with_failover",
]
