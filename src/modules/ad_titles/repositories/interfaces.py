from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.ad_titles.models import AdTitle


class IAdTitleRepository(IRepository["AdTitle"]):
    """Repository contract for ad titles."""

    @abstractmethod
    def list_for_product(
        self, user_id: str, product_id: Any, active_only: bool = False
    ) -> List["AdTitle"]:
        """Titles of a product ordered by ``created_at``."""

    @abstractmethod
    def count_for_product(
        self, user_id: str, product_id: Any, exclude_id: Optional[Any] = None
    ) -> int:
        """Active and inactive titles of a product."""

    @abstractmethod
    def exists_with_key(
        self,
        user_id: str,
        product_id: Any,
        title_key: str,
        exclude_id: Optional[Any] = None,
    ) -> bool:
        """Whether ``title_key`` is already used on the product."""

    @abstractmethod
    def delete(self, entity: "AdTitle") -> None:
        """Remove a title permanently."""
