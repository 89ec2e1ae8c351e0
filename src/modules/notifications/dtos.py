"""Notification DTOs (Pydantic v2, immutable)."""

from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from modules.core.normalization import to_int

DEFAULT_LIMIT = 50
MAX_LIMIT = 100


class NotificationQueryDTO(BaseModel):
    """Query string of ``GET notifications/``: ``unread=1``, ``active=1``, ``limit``."""

    model_config = ConfigDict(frozen=True)

    unread: bool = False
    active: bool = False
    limit: int = DEFAULT_LIMIT

    @field_validator("unread", "active", mode="before")
    @classmethod
    def flag(cls, v: Any) -> bool:
        return str(v).strip() == "1" if v is not None else False

    @field_validator("limit", mode="before")
    @classmethod
    def bounded_limit(cls, v: Any) -> int:
        limit = to_int(v)
        if not limit or limit < 1:
            return DEFAULT_LIMIT
        return min(limit, MAX_LIMIT)


class MarkReadDTO(BaseModel):
    """``{"ids": [...]}`` or ``{"all": true}``."""

    model_config = ConfigDict(frozen=True)

    ids: List[str] = []
    all: bool = False

    @field_validator("ids", mode="before")
    @classmethod
    def non_empty_ids(cls, v: Any) -> List[str]:
        if not isinstance(v, list):
            return []
        return [item.strip() for item in v if isinstance(item, str) and item.strip()]

    @field_validator("all", mode="before")
    @classmethod
    def strict_true(cls, v: Any) -> bool:
        return v is True

    @model_validator(mode="after")
    def ids_or_all(self) -> MarkReadDTO:
        if not self.all and not self.ids:
            raise ValueError("ids (lista de UUID) ou all: true é obrigatório")
        return self
