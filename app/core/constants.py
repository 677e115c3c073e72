"""Application-wide constants.

This module centralizes magic numbers and fixed domain values that are
used across multiple modules. For environment-specific configuration,
see config.py.
"""

# =============================================================================
# Pagination Defaults
# =============================================================================

# Default page size for list endpoints
DEFAULT_PAGE_SIZE: int = 20

# Maximum page size to prevent abuse
MAX_PAGE_SIZE: int = 100

# =============================================================================
# Content Limits
# =============================================================================

SUBJECT_MAX_LENGTH: int = 255
DESCRIPTION_MAX_LENGTH: int = 10000
COMMENT_MAX_LENGTH: int = 5000
ARTICLE_MAX_LENGTH: int = 50000
CATEGORY_NAME_MAX_LENGTH: int = 100

# =============================================================================
# Dashboard
# =============================================================================

DASHBOARD_MAX_WINDOW_DAYS: int = 365

UNCATEGORIZED_LABEL: str = "Uncategorized"

# =============================================================================
# SLA Defaults (hours)
# =============================================================================

# priority -> (response_time, resolution_time)
DEFAULT_SLA_HOURS: dict[str, tuple[int, int]] = {
    "urgent": (1, 4),
    "high": (4, 8),
    "medium": (8, 24),
    "low": (24, 48),
}
