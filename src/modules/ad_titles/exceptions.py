"""Ad title domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import DomainError
from shared.domain.results import ErrorCode


class AdTitleNotFound(DomainError):
    code = ErrorCode.TITLE_NOT_FOUND
    default_message = "Título não encontrado"


class TitleAlreadyExists(DomainError):
    code = ErrorCode.TITLE_DUPLICATE
    default_message = "Título já cadastrado para este produto"


class AdTitleRuleViolation(DomainError):
    """Empty title or title limit; the code comes from the failing result."""

    code = ErrorCode.INVALID_INPUT
