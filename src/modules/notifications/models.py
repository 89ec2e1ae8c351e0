"""Seller notifications (stock incidents).

A notification is *active* while ``resolved_at`` is unset.  The partial
unique constraint on ``(user_id, dedupe_key)`` over active rows makes the
"one open incident per scope" rule hold under concurrent job runs.

``product_id`` / ``variant_id`` are plain UUID columns so an incident
outlives the row that opened it.  Incidents of variants removed by an
edit are resolved by ``ProductVariantsRemovedHandler``.
"""

from __future__ import annotations

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from modules.core.models import BaseModel
from shared.domain.events import DomainEventMixin


class NotificationType(models.TextChoices):
    STOCK_LOW = "STOCK_LOW", "Stock low"


class Notification(DomainEventMixin, BaseModel):
    user_id = models.CharField(max_length=255, db_index=True)
    type = models.CharField(max_length=40, choices=NotificationType.choices)
    product_id = models.UUIDField(db_index=True)
    variant_id = models.UUIDField(null=True, blank=True)
    variant_key = models.CharField(max_length=255, null=True, blank=True)
    payload = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)
    dedupe_key = models.CharField(max_length=255)
    read_at = models.DateTimeField(null=True, blank=True)
    resolved_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "notifications"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user_id", "created_at"], name="notifications_user_created_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["user_id", "dedupe_key"],
                condition=models.Q(resolved_at__isnull=True),
                name="notifications_active_dedupe_uniq",
            ),
        ]

    @property
    def is_active(self) -> bool:
        return self.resolved_at is None

    def __str__(self) -> str:
        return f"{self.type} {self.dedupe_key}"
