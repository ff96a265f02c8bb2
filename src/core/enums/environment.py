"""Application environment types.

Used by Settings to switch environment-specific behavior (log rendering,
secrets backend defaults, debug endpoints).
"""

from enum import Enum


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"
    PRODUCTION = "production"
