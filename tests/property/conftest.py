from __future__ import annotations

import os

from hypothesis import settings

# Deterministic by default so CI failures reproduce; set
# COMBIMAP_HYPOTHESIS_PROFILE=explore locally to search with fresh seeds.
settings.register_profile(
    "deterministic", derandomize=True, max_examples=100, deadline=None, print_blob=True
)
settings.register_profile("explore", max_examples=500, deadline=None)

settings.load_profile(os.environ.get("COMBIMAP_HYPOTHESIS_PROFILE", "deterministic"))
