"""Ad title limit and duplicate checks.

Create runs: empty -> limit -> duplicate.  Update runs empty and
duplicate (excluding the title itself) and skips the limit.  The
repository's unique constraint still decides concurrent inserts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from modules.core.normalization import normalize_title
from shared.domain.results import ErrorCode, ValidationResult

if TYPE_CHECKING:
    from modules.ad_titles.repositories.interfaces import IAdTitleRepository

MAX_AD_TITLES_PER_PRODUCT = 10


def validate_title_not_empty(title: Any) -> ValidationResult:
    if not normalize_title(title):
        return ValidationResult.fail(ErrorCode.TITLE_EMPTY, "Título não pode ser vazio")
    return ValidationResult.ok()


class AdTitleValidator:
    def __init__(
        self,
        repository: IAdTitleRepository,
        max_titles: int = MAX_AD_TITLES_PER_PRODUCT,
    ) -> None:
        self._repo = repository
        self._max_titles = max_titles

    def validate_new_title_limit(
        self, user_id: str, product_id: Any, exclude_id: Optional[Any] = None
    ) -> ValidationResult:
        count = self._repo.count_for_product(user_id, product_id, exclude_id)
        if count >= self._max_titles:
            return ValidationResult.fail(
                ErrorCode.MAX_TITLES_REACHED,
                f"Limite de {self._max_titles} títulos por produto atingido",
                {"count": count},
            )
        return ValidationResult.ok(count=count)

    def validate_title_not_duplicate(
        self,
        user_id: str,
        product_id: Any,
        title_key: str,
        exclude_id: Optional[Any] = None,
    ) -> ValidationResult:
        if self._repo.exists_with_key(user_id, product_id, title_key, exclude_id):
            return ValidationResult.fail(
                ErrorCode.TITLE_DUPLICATE,
                "Título já cadastrado para este produto",
            )
        return ValidationResult.ok()
