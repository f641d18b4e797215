"""
Constants and configuration for chat module features.

This module centralizes configuration values for:
- Message search (query length, page sizes)
- Message listing (page sizes)

These values can be overridden via Django settings (CHAT_* keys).
Import example:
    from chat.constants import MESSAGE_CONFIG
"""

from typing import Final

from django.conf import settings


# =============================================================================
# Message Configuration
# =============================================================================


class MESSAGE_CONFIG:
    """Configuration for message operations."""

    # Search settings
    SEARCH_MIN_QUERY_LENGTH: Final[int] = getattr(
        settings, "CHAT_SEARCH_MIN_QUERY_LENGTH", 2
    )
    SEARCH_MAX_RESULTS: Final[int] = getattr(settings, "CHAT_SEARCH_MAX_RESULTS", 50)
    SEARCH_DEFAULT_PAGE_SIZE: Final[int] = getattr(
        settings, "CHAT_SEARCH_DEFAULT_PAGE_SIZE", 20
    )

    # Listing settings
    LIST_DEFAULT_PAGE_SIZE: Final[int] = 50
    LIST_MAX_PAGE_SIZE: Final[int] = getattr(
        settings, "CHAT_MESSAGE_LIST_MAX_PAGE_SIZE", 100
    )

    # Content preview length in admin and __str__
    PREVIEW_LENGTH: Final[int] = 50
