"""
Tests for handle_service_errors.

Verifies that view methods wrapped by the decorator:
- Return their own response untouched on success
- Map BaseApplicationError subclasses to their status and body
- Let DRF exceptions through for DRF to render
- Turn anything else into a generic 500
"""

import pytest
from rest_framework import serializers, status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.test import APIRequestFactory
from rest_framework.views import APIView

from core.decorators import handle_service_errors
from core.exceptions import NotFoundError, PermissionDeniedError


class _ItemSerializer(serializers.Serializer):
    count = serializers.IntegerField()


def make_view(behaviour):
    """Build an APIView whose GET runs behaviour() inside the decorator."""

    class ItemView(APIView):
        authentication_classes = []
        permission_classes = [AllowAny]

        @handle_service_errors("load item")
        def get(self, request):
            return behaviour(request)

    return ItemView.as_view()


@pytest.fixture
def rf():
    return APIRequestFactory()


class TestHandleServiceErrors:
    def test_passes_response_through(self, rf):
        view = make_view(lambda request: Response({"ok": True}))

        response = view(rf.get("/item/"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"ok": True}

    def test_not_found_maps_to_404(self, rf):
        def behaviour(request):
            raise NotFoundError("Item 7 not found", details={"item_id": 7})

        response = make_view(behaviour)(rf.get("/item/"))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {
            "error": "Item 7 not found",
            "error_code": "NOT_FOUND",
            "details": {"item_id": 7},
        }

    def test_permission_denied_maps_to_403(self, rf):
        def behaviour(request):
            raise PermissionDeniedError("Nope")

        response = make_view(behaviour)(rf.get("/item/"))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data["error_code"] == "PERMISSION_DENIED"

    def test_drf_validation_error_passes_through(self, rf):
        def behaviour(request):
            serializer = _ItemSerializer(data={"count": "many"})
            serializer.is_valid(raise_exception=True)

        response = make_view(behaviour)(rf.get("/item/"))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "count" in response.data

    def test_unexpected_error_is_generic_500(self, rf):
        def behaviour(request):
            raise KeyError("secret internal detail")

        response = make_view(behaviour)(rf.get("/item/"))

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data == {"error": "Failed to load item"}

    def test_preserves_method_name(self):
        @handle_service_errors("do things")
        def read(view, request):
            """Mark as read."""

        assert read.__name__ == "read"
        assert read.__doc__ == "Mark as read."
