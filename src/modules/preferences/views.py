"""User preference API views."""

from __future__ import annotations

from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.core.authentication import get_owner_id
from modules.core.conf import get_service_settings
from modules.preferences.repositories import PreferenceDjangoRepository
from modules.preferences.services import PreferenceService


def _service() -> PreferenceService:
    return PreferenceService(PreferenceDjangoRepository(), settings=get_service_settings())


def _body(request: Request) -> dict:
    return request.data if isinstance(request.data, dict) else {}


class PreferenceView(APIView):
    """GET / PUT / DELETE /api/v1/preferences/"""

    def get(self, request: Request) -> Response:
        preferences = _service().get_preferences(
            get_owner_id(request.user), request.query_params.get("prefix")
        )
        return Response({"ok": True, "preferences": preferences})

    def put(self, request: Request) -> Response:
        data = _body(request)
        key, value = _service().put_preference(
            get_owner_id(request.user), data.get("key"), data.get("value")
        )
        return Response({"ok": True, "key": key, "value": value})

    def delete(self, request: Request) -> Response:
        _service().delete_preference(get_owner_id(request.user), request.query_params.get("key"))
        return Response({"ok": True})


class PreferenceResetView(APIView):
    """POST /api/v1/preferences/reset/"""

    def post(self, request: Request) -> Response:
        count = _service().reset_preferences(get_owner_id(request.user), _body(request).get("prefix"))
        return Response({"ok": True, "count": count})
