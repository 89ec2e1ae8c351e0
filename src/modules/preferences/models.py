"""Per-user UI preferences (dismissed modals, warnings, layout flags)."""

from __future__ import annotations

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from modules.core.models import BaseModel
from shared.domain.events import DomainEventMixin


class UserPreference(DomainEventMixin, BaseModel):
    user_id = models.CharField(max_length=255, db_index=True)
    key = models.CharField(max_length=100)
    value = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)

    class Meta:
        db_table = "user_preferences"
        ordering = ["key"]
        constraints = [
            models.UniqueConstraint(fields=["user_id", "key"], name="user_preferences_user_key_uniq"),
        ]

    def __str__(self) -> str:
        return f"{self.user_id}:{self.key}"
