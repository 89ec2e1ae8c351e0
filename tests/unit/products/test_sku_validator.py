"""Unit tests for SkuUniquenessValidator (repository mocked)."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from modules.products.sku_validator import SkuUniquenessValidator
from shared.domain.results import ErrorCode

pytestmark = pytest.mark.unit


@pytest.fixture()
def mock_repo():
    repo = MagicMock()
    repo.simple_product_skus.return_value = iter([])
    repo.variant_skus.return_value = iter([])
    return repo


@pytest.fixture()
def validator(mock_repo):
    return SkuUniquenessValidator(mock_repo)


def _variant(sku):
    return SimpleNamespace(sku=sku)


class TestPayloadDuplicates:
    def test_duplicate_variant_skus_fail_before_any_repository_call(self, validator, mock_repo):
        product = SimpleNamespace(format="variants", sku=None)

        result = validator.validate(product, [_variant("abc "), _variant(" ABC")], user_id="u1")

        assert result.code == ErrorCode.SKU_DUPLICATE
        assert result.details == {"sku": "ABC", "scope": "payload"}
        mock_repo.simple_product_skus.assert_not_called()
        mock_repo.variant_skus.assert_not_called()

    def test_empty_variant_skus_are_ignored(self, validator):
        product = SimpleNamespace(format="variants", sku=None)
        assert validator.validate(product, [_variant(""), _variant(None)], user_id="u1").valid


class TestCatalogCollisions:
    def test_no_candidates_skips_repository(self, validator, mock_repo):
        product = SimpleNamespace(format="simple", sku="  ")
        assert validator.validate(product, [], user_id="u1").valid
        mock_repo.simple_product_skus.assert_not_called()

    def test_simple_sku_collides_with_other_simple_product(self, validator, mock_repo):
        mock_repo.simple_product_skus.return_value = iter([("mon-1", "p-9")])
        product = SimpleNamespace(format="simple", sku="MON-1")

        result = validator.validate(product, [], user_id="u1")

        assert result.code == ErrorCode.SKU_DUPLICATE
        assert result.details == {"sku": "MON-1", "scope": "database", "collisionProductId": "p-9"}

    def test_simple_sku_collides_with_a_variant(self, validator, mock_repo):
        mock_repo.variant_skus.return_value = iter([("MON-1", "p-3")])
        product = SimpleNamespace(format="simple", sku="mon-1")

        result = validator.validate(product, [], user_id="u1")

        assert result.details["collisionProductId"] == "p-3"

    def test_edited_product_is_excluded(self, validator, mock_repo):
        product = SimpleNamespace(format="simple", sku="MON-1")

        validator.validate(product, [], user_id="u1", exclude_product_id="p-1")

        mock_repo.simple_product_skus.assert_called_once_with("u1", "p-1")
        mock_repo.variant_skus.assert_called_once_with("u1", "p-1")

    def test_unique_sku_passes(self, validator, mock_repo):
        mock_repo.simple_product_skus.return_value = iter([("OTHER", "p-2")])
        product = SimpleNamespace(format="simple", sku="MON-1")
        assert validator.validate(product, [], user_id="u1").valid
