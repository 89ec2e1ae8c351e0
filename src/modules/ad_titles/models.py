"""Alternative marketplace titles for a product.

At most ``MAX_AD_TITLES_PER_PRODUCT`` rows per (user, product), counting
active and inactive titles.  ``title_normalized`` is the comparison key
(whitespace-collapsed, lower-cased); the unique constraint on it is the
authoritative duplicate guard.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel
from shared.domain.events import DomainEventMixin


class AdTitle(DomainEventMixin, BaseModel):
    user_id = models.CharField(max_length=255, db_index=True)
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.CASCADE,
        related_name="ad_titles",
    )
    title = models.CharField(max_length=255)
    title_normalized = models.CharField(max_length=255)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "product_ad_titles"
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user_id", "product", "title_normalized"],
                name="ad_titles_user_product_title_uniq",
            ),
        ]

    def __str__(self) -> str:
        return self.title
