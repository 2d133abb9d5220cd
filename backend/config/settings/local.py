"""
Local development settings.

Extends base settings with development-friendly defaults.
"""

from .base import *  # noqa: F403

DEBUG = True
ALLOWED_HOSTS = ["localhost", "127.0.0.1"]

# Human-readable console logs in development
LOG_JSON = False
LOG_LEVEL = "DEBUG"
