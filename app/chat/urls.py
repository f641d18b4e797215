"""
URL configuration for chat API.

URL Structure:
    Conversations:
        /conversations/                    GET
        /conversations/{id}/               GET
        /conversations/{id}/read/          POST
        /conversations/{id}/unread/        GET
        /conversations/{id}/messages/      GET

    Search:
        /messages/search/                  GET

All URLs are prefixed with /api/v1/chat/ in the main URL configuration.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from chat.views import ConversationViewSet, MessageSearchView

# Main router for conversations
router = DefaultRouter()
router.register(r"conversations", ConversationViewSet, basename="conversation")

app_name = "chat"

urlpatterns = [
    path("", include(router.urls)),
    # Message search endpoint (searches across all user's conversations)
    path("messages/search/", MessageSearchView.as_view(), name="message-search"),
]
