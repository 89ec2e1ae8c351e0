"""Notification API views.

- ``StockCheckJobView``: internal trigger for the stock-minimum job,
  guarded by the ``X-Job-Secret`` header instead of a user token.
- ``NotificationListView`` / ``MarkReadView``: the seller's inbox.
"""

from __future__ import annotations

import hmac

import structlog
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.core.authentication import get_owner_id
from modules.core.conf import get_service_settings
from modules.core.middleware import get_trace_id
from modules.notifications.dtos import MarkReadDTO, NotificationQueryDTO
from modules.notifications.exceptions import InvalidJobSecret
from modules.notifications.repositories import NotificationDjangoRepository
from modules.notifications.serializers import NotificationSerializer
from modules.notifications.services import NotificationService, StockIncidentService

logger = structlog.get_logger(__name__)


class StockCheckJobView(APIView):
    """POST (or GET) /api/v1/jobs/stock-min-check/

    When ``JOB_SECRET`` is empty the endpoint is open.
    """

    authentication_classes: list = []
    permission_classes = [AllowAny]
    throttle_classes: list = []

    def get(self, request: Request) -> Response:
        return self._run(request)

    def post(self, request: Request) -> Response:
        return self._run(request)

    def _run(self, request: Request) -> Response:
        settings = get_service_settings()
        if settings.job_secret:
            provided = request.headers.get("X-Job-Secret") or ""
            if not hmac.compare_digest(provided.encode(), settings.job_secret.encode()):
                logger.warning("stock_check.bad_secret")
                raise InvalidJobSecret()

        service = StockIncidentService(
            repository=NotificationDjangoRepository(),
            settings=settings,
        )
        summary = service.run_check()
        return Response(
            {
                "ok": True,
                "created": summary.created,
                "resolved": summary.resolved,
                "traceId": get_trace_id(),
            }
        )


class NotificationListView(APIView):
    """GET /api/v1/notifications/?unread=1&active=1&limit=50"""

    def get(self, request: Request) -> Response:
        query = NotificationQueryDTO(
            unread=request.query_params.get("unread"),
            active=request.query_params.get("active"),
            limit=request.query_params.get("limit"),
        )
        notifications = NotificationService(NotificationDjangoRepository()).list_notifications(
            get_owner_id(request.user),
            unread=query.unread,
            active=query.active,
            limit=query.limit,
        )
        return Response(
            {"ok": True, "notifications": NotificationSerializer(notifications, many=True).data}
        )


class MarkReadView(APIView):
    """POST /api/v1/notifications/mark-read/"""

    def post(self, request: Request) -> Response:
        data = request.data if isinstance(request.data, dict) else {}
        dto = MarkReadDTO(ids=data.get("ids"), all=data.get("all"))
        service = NotificationService(NotificationDjangoRepository())
        count = service.mark_read(
            get_owner_id(request.user),
            ids=None if dto.all else dto.ids,
        )
        return Response({"ok": True, "count": count})
