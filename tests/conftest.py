"""Pytest configuration and shared fixtures."""

import os

from hypothesis import settings

# Channel defaults are read at import; pin them so the suite is reproducible.
os.environ.pop("STREAMSTACK_BLOCK_SIZE", None)
os.environ.pop("STREAMSTACK_ENCODING", None)

# Create a profile named "no_deadline" with deadline disabled.
settings.register_profile("no_deadline", deadline=None)
settings.load_profile("no_deadline")
