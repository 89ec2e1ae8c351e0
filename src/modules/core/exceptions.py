"""Domain error base class and the DRF exception handler.

Every failed API call is rendered as::

    {"code": "...", "message": "...", "details": {...}, "traceId": "..."}

``details`` is omitted when empty.  Unexpected exceptions are logged with
the trace id and surfaced as ``INTERNAL_ERROR`` without leaking internals
unless ``EXPOSE_ERROR_DETAILS`` is enabled.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.conf import settings
from django.core.exceptions import PermissionDenied
from django.db import DatabaseError
from django.http import Http404
from pydantic import ValidationError as PydanticValidationError
from rest_framework import exceptions as drf_exceptions
from rest_framework.response import Response
from rest_framework.views import set_rollback

from modules.core.middleware import get_trace_id
from shared.domain.results import HTTP_STATUS_BY_CODE, ErrorCode, ValidationResult

logger = structlog.get_logger(__name__)


class DomainError(Exception):
    """Business-rule failure carrying an error code and HTTP status."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    default_message = "Erro interno"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        code: Optional[ErrorCode] = None,
    ) -> None:
        if code is not None:
            self.code = code
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return HTTP_STATUS_BY_CODE.get(self.code, 500)

    @classmethod
    def from_result(cls, result: ValidationResult) -> DomainError:
        return cls(message=result.message, details=result.details, code=result.code)


class InvalidInput(DomainError):
    """Malformed or missing request fields."""

    code = ErrorCode.INVALID_INPUT
    default_message = "Dados inválidos"


class StorageError(DomainError):
    """The database rejected or failed a write."""

    code = ErrorCode.DB_ERROR
    default_message = "Erro ao acessar o banco de dados"


class ConfigurationError(DomainError):
    """A required deployment setting is missing."""

    code = ErrorCode.CONFIG_ERROR
    default_message = "Configuração do servidor ausente"


def error_payload(
    code: ErrorCode | str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"code": str(code), "message": message}
    if details:
        body["details"] = details
    body["traceId"] = get_trace_id()
    return body


def error_response(
    code: ErrorCode,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    status: Optional[int] = None,
) -> Response:
    return Response(
        error_payload(code, message, details),
        status=status or HTTP_STATUS_BY_CODE.get(code, 500),
    )


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """DRF ``EXCEPTION_HANDLER`` producing the standard error envelope."""
    view = context.get("view")
    log = logger.bind(view=view.__class__.__name__ if view else None)

    if isinstance(exc, DomainError):
        log.info("api.domain_error", code=str(exc.code), detail=exc.message)
        return error_response(exc.code, exc.message, exc.details, exc.status_code)

    if isinstance(exc, PydanticValidationError):
        errors = [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
        return error_response(
            ErrorCode.INVALID_INPUT, "Dados inválidos", {"errors": errors}
        )

    if isinstance(exc, (drf_exceptions.NotAuthenticated, drf_exceptions.AuthenticationFailed)):
        response = error_response(ErrorCode.UNAUTHORIZED, str(exc.detail), status=401)
        auth_header = getattr(exc, "auth_header", None)
        if auth_header:
            response["WWW-Authenticate"] = auth_header
        return response

    if isinstance(exc, drf_exceptions.MethodNotAllowed):
        return error_response(ErrorCode.METHOD_NOT_ALLOWED, "Método não permitido")

    if isinstance(exc, (drf_exceptions.ParseError, drf_exceptions.ValidationError)):
        details = exc.detail if isinstance(exc.detail, dict) else {"errors": exc.detail}
        return error_response(ErrorCode.INVALID_INPUT, "Dados inválidos", details)

    if isinstance(exc, Http404):
        exc = drf_exceptions.NotFound()
    elif isinstance(exc, PermissionDenied):
        exc = drf_exceptions.PermissionDenied()

    if isinstance(exc, drf_exceptions.APIException):
        response = Response(
            error_payload(str(exc.default_code).upper(), str(exc.detail)),
            status=exc.status_code,
        )
        wait = getattr(exc, "wait", None)
        if wait:
            response["Retry-After"] = str(int(wait))
        return response

    expose = getattr(settings, "EXPOSE_ERROR_DETAILS", False)
    details = {"error": str(exc)} if expose else None

    set_rollback()
    if isinstance(exc, DatabaseError):
        log.exception("api.db_error")
        return error_response(ErrorCode.DB_ERROR, "Erro ao acessar o banco de dados", details)

    log.exception("api.unhandled_error")
    return error_response(ErrorCode.INTERNAL_ERROR, "Erro interno", details)
