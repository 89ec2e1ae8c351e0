"""Product domain constants.

Defines format / status choices, the status state machine transition
table and the thresholds used by the health evaluator.
"""

from django.db import models


class ProductFormat(models.TextChoices):
    SIMPLE = "simple", "Simples"
    VARIANTS = "variants", "Com variações"


class ProductStatus(models.TextChoices):
    DRAFT = "draft", "Rascunho"
    READY = "ready", "Pronto"
    PUBLISHED = "published", "Publicado"
    BLOCKED = "blocked", "Bloqueado"


class UpsertMode(models.TextChoices):
    CREATE = "create", "Create"
    EDIT = "edit", "Edit"


VALID_TRANSITIONS: dict[str, set[str]] = {
    ProductStatus.DRAFT: {ProductStatus.READY},
    ProductStatus.READY: {ProductStatus.DRAFT, ProductStatus.PUBLISHED},
    ProductStatus.PUBLISHED: {ProductStatus.BLOCKED},
    ProductStatus.BLOCKED: {ProductStatus.READY},
}

VALID_STATUSES: frozenset[str] = frozenset(ProductStatus.values)

# Health evaluator thresholds
TITLE_MAX_CHARS = 60
DESCRIPTION_MIN_CHARS = 50
