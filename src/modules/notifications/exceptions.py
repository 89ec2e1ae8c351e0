"""Notification domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import DomainError
from shared.domain.results import ErrorCode


class InvalidJobSecret(DomainError):
    """``X-Job-Secret`` missing or different from ``JOB_SECRET``."""

    code = ErrorCode.UNAUTHORIZED
    default_message = "Token de job inválido"
