from __future__ import annotations

from typing import Any

from modules.core.normalization import normalize_key
from shared.domain.results import ErrorCode, ValidationResult

MAX_KEY_LENGTH = 100


def validate_key(key: Any, max_length: int = MAX_KEY_LENGTH) -> ValidationResult:
    """Validate a preference key after normalisation."""
    normalized = normalize_key(key)
    if not normalized:
        return ValidationResult.fail(ErrorCode.KEY_INVALID, "Chave não pode ser vazia.")
    if len(normalized) > max_length:
        return ValidationResult.fail(
            ErrorCode.KEY_INVALID,
            f"Chave excede {max_length} caracteres.",
            {"maxLength": max_length},
        )
    return ValidationResult.ok(key=normalized)
