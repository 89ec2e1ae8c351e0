import uuid
from contextvars import ContextVar
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

trace_id_var: ContextVar[str] = ContextVar("trace_id", default="")

logger = structlog.get_logger()

TRACE_HEADERS = ("HTTP_X_TRACE_ID", "HTTP_X_REQUEST_ID")


def get_trace_id() -> str:
    """Trace id of the current request, or a fresh one outside a request."""
    return trace_id_var.get() or str(uuid.uuid4())


class TraceIdMiddleware:
    """Middleware that extracts or generates a trace ID for each request.

    Reads ``X-Trace-ID`` (or the legacy ``X-Request-ID``) header from the
    incoming request. If absent, generates a new UUID4. The ID is stored in
    a ContextVar so structlog processors inject it into every log line and
    the error envelope can echo it as ``traceId``. It is returned to the
    client via the ``X-Trace-ID`` and ``X-Request-ID`` response headers.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        trace_id = next(
            (request.META[h] for h in TRACE_HEADERS if request.META.get(h)),
            None,
        ) or str(uuid.uuid4())
        token = trace_id_var.set(trace_id)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(trace_id=trace_id)

        logger.info(
            "request_started",
            method=request.method,
            path=request.get_full_path(),
        )

        try:
            response = self.get_response(request)
        finally:
            trace_id_var.reset(token)

        logger.info(
            "request_finished",
            method=request.method,
            path=request.get_full_path(),
            status_code=response.status_code,
        )

        response["X-Trace-ID"] = trace_id
        response["X-Request-ID"] = trace_id
        return response
