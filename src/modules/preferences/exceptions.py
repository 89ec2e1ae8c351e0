"""Preference domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import DomainError
from shared.domain.results import ErrorCode


class PreferenceNotFound(DomainError):
    code = ErrorCode.PREFERENCE_NOT_FOUND
    default_message = "Preferência não encontrada"


class InvalidPreferenceKey(DomainError):
    code = ErrorCode.KEY_INVALID
    default_message = "Chave inválida"
