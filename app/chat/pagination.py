"""
Pagination classes for chat API.

Cursor-based pagination advantages:
- Stable results during concurrent inserts
- No offset calculation needed

Message listing and search page by message id in the service layer and
do not use these classes.
"""

from rest_framework.pagination import CursorPagination


class ConversationCursorPagination(CursorPagination):
    """
    Cursor pagination for conversation lists.

    Orders conversations by most recent activity: the last message time,
    falling back to creation time for conversations without messages
    (the queryset annotates this as activity_at).

    Default: 20 conversations per page
    Maximum: 50 conversations per page

    Query parameters:
        cursor: Encoded cursor for position
        page_size: Number of conversations (optional override)
    """

    page_size = 20
    max_page_size = 50
    page_size_query_param = "page_size"
    ordering = ("-activity_at", "-id")
    cursor_query_param = "cursor"
