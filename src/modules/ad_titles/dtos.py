"""Ad title DTOs (Pydantic v2, immutable)."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from modules.core.normalization import clean_text, normalize_title


class CreateAdTitleDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: str
    title: str = ""

    @field_validator("product_id", mode="before")
    @classmethod
    def required_product(cls, v: Any) -> str:
        text = clean_text(v) if isinstance(v, str) else ("" if v is None else str(v))
        if not text:
            raise ValueError("Field is required.")
        return text

    @field_validator("title", mode="before")
    @classmethod
    def collapse_title(cls, v: Any) -> str:
        return normalize_title(v)


class UpdateAdTitleDTO(BaseModel):
    """Partial update; at least one of ``title`` / ``is_active`` is required."""

    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("title", mode="before")
    @classmethod
    def collapse_title(cls, v: Any) -> Optional[str]:
        return None if v is None else normalize_title(v)

    @model_validator(mode="after")
    def something_to_update(self) -> UpdateAdTitleDTO:
        if self.title is None and self.is_active is None:
            raise ValueError("Informe 'title' ou 'is_active'.")
        return self
