"""
Views for chat API.

This module provides REST API endpoints for the chat system:
- ConversationViewSet: Conversation list/detail plus read-state actions
- MessageSearchView: Search across the caller's conversations

URL Structure:
    /api/v1/chat/conversations/                    GET
    /api/v1/chat/conversations/{id}/               GET
    /api/v1/chat/conversations/{id}/read/          POST
    /api/v1/chat/conversations/{id}/unread/        GET
    /api/v1/chat/conversations/{id}/messages/      GET
    /api/v1/chat/messages/search/                  GET

Design Decisions:
    - Views are thin: parse the request with a serializer, call one service,
      serialize the result
    - The caller's id comes from request.user and is passed explicitly
    - Service exceptions map to 403/404/400 via handle_service_errors;
      anything unexpected is logged and returned as a generic 500
"""

from __future__ import annotations

from django.db.models import F
from django.db.models.functions import Coalesce
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
    extend_schema_view,
)
from rest_framework import mixins, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from chat.models import Conversation
from chat.pagination import ConversationCursorPagination
from chat.registry import ParticipantRegistry
from chat.serializers import (
    ConversationListSerializer,
    MarkReadSerializer,
    MessageListParamsSerializer,
    MessageSearchParamsSerializer,
    MessageSearchResultSerializer,
    MessageSerializer,
    ReadMarkerSerializer,
)
from chat.services import MessageSearchService, MessageStore, ReadStateService
from core.decorators import handle_service_errors


@extend_schema_view(
    list=extend_schema(
        operation_id="list_conversations",
        summary="List conversations",
        description=(
            "Conversations the caller is an active participant in, most recent "
            "activity first, each with the caller's unread count."
        ),
        tags=["Chat - Conversations"],
    ),
)
class ConversationViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    ViewSet for conversation read operations.

    list:
        Get all conversations for the current user.
        Returns paginated list with unread counts.

    retrieve:
        Get a single conversation the user participates in.

    read:
        Mark conversation as read up to a message (default: newest).

    unread:
        Unread count and current read marker.

    messages:
        Message history in sequence order.
    """

    permission_classes = [IsAuthenticated]
    pagination_class = ConversationCursorPagination
    serializer_class = ConversationListSerializer
    lookup_value_regex = r"[0-9]+"

    def get_queryset(self):
        """Filter to conversations where user is an active participant."""
        if not self.request.user.is_authenticated:
            return Conversation.objects.none()

        return (
            Conversation.objects.filter(
                participants__user=self.request.user,
                participants__left_at__isnull=True,
            )
            .annotate(activity_at=Coalesce(F("last_message_at"), F("created_at")))
            .order_by("-activity_at", "-id")
        )

    def get_serializer_context(self):
        """Precompute unread counts once for the whole list page."""
        context = super().get_serializer_context()
        if self.action == "list" and self.request.user.is_authenticated:
            context["unread_counts"] = ReadStateService.get_unread_counts(
                self.request.user.pk
            )
        return context

    @extend_schema(
        operation_id="get_conversation",
        summary="Get conversation",
        responses={
            200: ConversationListSerializer,
            403: OpenApiResponse(description="Not a participant"),
            404: OpenApiResponse(description="Conversation not found"),
        },
        tags=["Chat - Conversations"],
    )
    @handle_service_errors("load conversation")
    def retrieve(self, request, pk=None):
        """Get a conversation the caller participates in."""
        conversation_id = int(pk)
        ParticipantRegistry.require_participant(conversation_id, request.user.pk)

        conversation = Conversation.objects.get(pk=conversation_id)
        serializer = self.get_serializer(conversation)
        return Response(serializer.data)

    @extend_schema(
        operation_id="mark_conversation_read",
        summary="Mark conversation as read",
        description=(
            "Advance the caller's read marker to `up_to` (or the newest message). "
            "The marker never moves backward; repeating the call is harmless."
        ),
        request=MarkReadSerializer,
        responses={
            200: OpenApiResponse(
                description="Marker state after the call",
                response=ReadMarkerSerializer,
            ),
            400: OpenApiResponse(description="Malformed body"),
            403: OpenApiResponse(description="Not a participant"),
            404: OpenApiResponse(description="Conversation or message not found"),
        },
        tags=["Chat - Conversations"],
    )
    @action(detail=True, methods=["post"])
    @handle_service_errors("mark messages as read")
    def read(self, request, pk=None):
        """Mark conversation as read."""
        params = MarkReadSerializer(data=request.data)
        params.is_valid(raise_exception=True)

        marker = ReadStateService.mark_read(
            conversation_id=int(pk),
            user_id=request.user.pk,
            up_to=params.validated_data.get("up_to"),
        )

        return Response({"success": True, **ReadMarkerSerializer(marker).data})

    @extend_schema(
        operation_id="get_conversation_unread",
        summary="Get unread count",
        responses={
            200: OpenApiResponse(
                description="conversation_id, unread_count, last_read_message_id"
            ),
            403: OpenApiResponse(description="Not a participant"),
            404: OpenApiResponse(description="Conversation not found"),
        },
        tags=["Chat - Conversations"],
    )
    @action(detail=True, methods=["get"])
    @handle_service_errors("load unread count")
    def unread(self, request, pk=None):
        """Unread count for the caller in this conversation."""
        conversation_id = int(pk)
        ParticipantRegistry.require_participant(conversation_id, request.user.pk)

        marker = ReadStateService.get_marker(conversation_id, request.user.pk)
        return Response(
            {
                "conversation_id": conversation_id,
                "unread_count": ReadStateService.get_unread_count(
                    conversation_id, request.user.pk
                ),
                "last_read_message_id": marker.last_read_message_id if marker else None,
            }
        )

    @extend_schema(
        operation_id="list_conversation_messages",
        summary="List messages",
        description="Messages in sequence order (oldest first), paged by `after_id`.",
        parameters=[MessageListParamsSerializer],
        responses={
            200: OpenApiResponse(description="messages and has_more flag"),
            400: OpenApiResponse(description="Invalid parameters"),
            403: OpenApiResponse(description="Not a participant"),
            404: OpenApiResponse(description="Conversation not found"),
        },
        tags=["Chat - Messages"],
    )
    @action(detail=True, methods=["get"])
    @handle_service_errors("load messages")
    def messages(self, request, pk=None):
        """Message history of a conversation."""
        params = MessageListParamsSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        limit = params.validated_data["limit"]

        conversation_id = int(pk)
        ParticipantRegistry.require_participant(conversation_id, request.user.pk)

        queryset = MessageStore.list_messages(
            conversation_id,
            after_id=params.validated_data.get("after_id"),
        )
        # Fetch one extra to check if there are more results
        messages = list(queryset[: limit + 1])
        has_more = len(messages) > limit

        return Response(
            {
                "messages": MessageSerializer(messages[:limit], many=True).data,
                "has_more": has_more,
            }
        )


class MessageSearchView(APIView):
    """
    Search messages across user's conversations.

    GET /api/v1/chat/messages/search/?q=query&conversation_id=X&cursor=Y&limit=Z

    Query parameters:
        q: Search query (min 2 characters after trimming)
        conversation_id: Optional - limit search to specific conversation
        cursor: Optional - pagination cursor from previous search
        limit: Optional - number of results per page (default 20, max 50)
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="search_messages",
        summary="Search messages",
        description=(
            "Case-insensitive substring search across all messages in conversations "
            "where the user is a participant, most recent first. Results can be "
            "filtered to a specific conversation and are paginated using cursors."
        ),
        parameters=[
            OpenApiParameter(
                name="q",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                description="Search query (minimum 2 characters after trimming)",
                required=True,
            ),
            OpenApiParameter(
                name="conversation_id",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                description="Limit search to a specific conversation",
                required=False,
            ),
            OpenApiParameter(
                name="cursor",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                description="Pagination cursor from previous search results",
                required=False,
            ),
            OpenApiParameter(
                name="limit",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                description="Number of results per page (default 20, max 50)",
                required=False,
            ),
        ],
        responses={
            200: OpenApiResponse(
                description="messages, query, conversation_id, next_cursor, has_more",
            ),
            400: OpenApiResponse(
                description="Query too short, invalid conversation_id or cursor",
            ),
            403: OpenApiResponse(description="Not a participant"),
            404: OpenApiResponse(description="Conversation not found"),
        },
        tags=["Chat - Search"],
    )
    @handle_service_errors("search messages")
    def get(self, request):
        """Search for messages."""
        params = MessageSearchParamsSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        data = params.validated_data

        query = data["q"].strip()
        conversation_id = data.get("conversation_id")

        page = MessageSearchService.search(
            user_id=request.user.pk,
            query=query,
            conversation_id=conversation_id,
            cursor=data.get("cursor") or None,
            limit=data.get("limit"),
        )

        return Response(
            {
                "messages": MessageSearchResultSerializer(page.results, many=True).data,
                "query": query,
                "conversation_id": conversation_id,
                "next_cursor": page.next_cursor,
                "has_more": page.has_more,
            }
        )
