"""Shared pytest configuration.

Property-based tests walk through decompositions that call the solver many
times, so per-example deadlines are disabled to keep slower CI machines from
failing spuriously.
"""

from hypothesis import settings

settings.register_profile("eternum_no_deadline", deadline=None, max_examples=50)
settings.load_profile("eternum_no_deadline")
