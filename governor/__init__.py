# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Context governor: token-budget trimming and model failover decisions
for long-lived agent sessions.
"""

__version__ = "0.1.0"
