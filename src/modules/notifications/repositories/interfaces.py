from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Iterable, Iterator, List, Optional

if TYPE_CHECKING:
    from modules.notifications.models import Notification
    from modules.products.models import Product, ProductVariant


class INotificationRepository(ABC):
    """Repository contract for notifications and the stock-check scan."""

    @abstractmethod
    def simple_product_pages(self, batch_size: int) -> Iterator[List["Product"]]:
        """Alive ``simple`` products with a minimum, page by page."""

    @abstractmethod
    def variant_pages(self, batch_size: int) -> Iterator[List["ProductVariant"]]:
        """Variants (of alive products) with a minimum, page by page."""

    @abstractmethod
    def find_active(self, user_id: str, dedupe_key: str) -> Optional["Notification"]:
        """The open incident for a scope, if any."""

    @abstractmethod
    def active_for_variants(
        self, user_id: str, variant_ids: Iterable[Any]
    ) -> List["Notification"]:
        """Open incidents of the given variants."""

    @abstractmethod
    def open(self, notification: "Notification") -> bool:
        """Insert an incident; ``False`` when one is already open."""

    @abstractmethod
    def resolve(self, notification: "Notification") -> "Notification":
        """Persist ``resolved_at`` on an open incident."""

    @abstractmethod
    def list_for_user(
        self, user_id: str, *, unread: bool, active: bool, limit: int
    ) -> List["Notification"]:
        """Newest first."""

    @abstractmethod
    def mark_read(self, user_id: str, ids: Optional[Iterable[str]] = None) -> int:
        """Stamp ``read_at`` on unread rows (all of them when ``ids`` is None)."""
