"""Domain events for the Products bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class ProductCreated(DomainEvent):
    """Raised when a product is created (always in ``draft``)."""

    entity_type = "product"
    action = "create"


@dataclass(frozen=True)
class ProductUpdated(DomainEvent):
    """Raised when an edit upsert rewrites a product."""

    entity_type = "product"
    action = "update"


@dataclass(frozen=True)
class ProductStatusChanged(DomainEvent):
    """Raised when a product moves through the status state machine."""

    entity_type = "product"
    action = "status_change"


@dataclass(frozen=True)
class ProductArchived(DomainEvent):
    """Raised when a product is soft-deleted."""

    entity_type = "product"
    action = "delete"


@dataclass(frozen=True)
class ProductVariantsRemoved(DomainEvent):
    """Raised when an edit drops variants; ``diff["variantIds"]`` lists them.

    Not audited on its own (the ``ProductUpdated`` of the same edit is).
    """
