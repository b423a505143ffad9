"""Pytest configuration and shared fixtures."""

from hypothesis import settings

pytest_plugins = ["pytester"]

# Create a profile named "no_deadline" with deadline disabled.
#
# Property tests drive an event loop per example, whose startup time varies.
settings.register_profile("no_deadline", deadline=None)
settings.load_profile("no_deadline")
