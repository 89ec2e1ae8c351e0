"""Product domain exceptions.

Raised by the Service Layer when a validator reports a violation or a
look-up misses.  The DRF exception handler renders them with their
error code and HTTP status.
"""

from __future__ import annotations

from modules.core.exceptions import DomainError
from shared.domain.results import ErrorCode


class ProductNotFound(DomainError):
    """The product does not exist, is archived, or belongs to someone else."""

    code = ErrorCode.PRODUCT_NOT_FOUND
    default_message = "Produto não encontrado"


class SkuAlreadyExists(DomainError):
    """A SKU collides with another product or variant of the same seller."""

    code = ErrorCode.SKU_DUPLICATE
    default_message = "SKU já cadastrado"


class ProductRuleViolation(DomainError):
    """Status transition, ready requirements, format lock or required fields.

    The concrete error code comes from the failing ``ValidationResult``.
    """

    code = ErrorCode.INVALID_INPUT
