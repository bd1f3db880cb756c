"""
rngkit.tests
------------
Test package initializer.

- Registers Hypothesis profiles: "dev" (fast local runs) and "ci" (deeper).
  The active profile comes from HYPOTHESIS_PROFILE, else "ci" when CI is set.
- Statistical tests use fixed sample sizes and conservative thresholds
  (p < 0.001) so a healthy generator fails them roughly once in a thousand runs.
"""

from __future__ import annotations

import os

from hypothesis import HealthCheck, settings

settings.register_profile(
    "dev",
    settings(max_examples=60, deadline=None, suppress_health_check=(HealthCheck.too_slow,)),
)
settings.register_profile(
    "ci",
    settings(max_examples=250, deadline=None, suppress_health_check=(HealthCheck.too_slow,)),
)
settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE") or ("ci" if os.environ.get("CI") else "dev"))

__all__: tuple[str, ...] = ()
