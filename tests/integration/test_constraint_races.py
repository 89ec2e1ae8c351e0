"""The database constraints decide when the advisory pre-checks are raced.

The validators are patched to "see nothing" so the write reaches the
unique constraint, as it would when two requests interleave.
"""

from __future__ import annotations

import uuid
from unittest.mock import patch

import pytest

from modules.ad_titles.validators import AdTitleValidator
from modules.notifications.models import Notification
from modules.notifications.repositories import NotificationDjangoRepository
from modules.preferences.models import UserPreference
from modules.preferences.repositories import PreferenceDjangoRepository
from modules.products.models import Product, ProductSku, ProductVariant
from modules.products.sku_validator import SkuUniquenessValidator
from shared.domain.results import ValidationResult
from tests.conftest import SELLER_ID

pytestmark = pytest.mark.integration


def test_product_sku_constraint_maps_to_409(auth_client, make_product):
    make_product(sku="MON-27")

    with patch.object(SkuUniquenessValidator, "validate", return_value=ValidationResult.ok()):
        response = auth_client.post(
            "/api/v1/products/upsert/",
            {"product": {"product_name": "Outro", "sku": "MON-27"}},
            format="json",
        )

    assert response.status_code == 409
    assert response.json()["code"] == "SKU_DUPLICATE"
    assert response.json()["details"]["scope"] == "database"


def test_variant_sku_constraint_maps_to_409(auth_client):
    with patch.object(SkuUniquenessValidator, "validate", return_value=ValidationResult.ok()):
        response = auth_client.post(
            "/api/v1/products/upsert/",
            {
                "product": {"product_name": "Camiseta", "format": "variants"},
                "variants": [{"sku": "CAM-P"}, {"sku": "CAM-P"}],
            },
            format="json",
        )

    assert response.status_code == 409
    assert response.json()["code"] == "SKU_DUPLICATE"


def test_variant_sku_taken_by_simple_product_maps_to_409(auth_client, make_product):
    holder = make_product(sku="DUP-1")

    with patch.object(SkuUniquenessValidator, "validate", return_value=ValidationResult.ok()):
        response = auth_client.post(
            "/api/v1/products/upsert/",
            {"product": {"product_name": "Camiseta", "format": "variants"}, "variants": [{"sku": "dup-1"}]},
            format="json",
        )

    assert response.status_code == 409
    assert response.json()["details"] == {
        "sku": "DUP-1",
        "scope": "database",
        "collisionProductId": str(holder.id),
    }
    assert Product.objects.filter(product_name="Camiseta").count() == 0


def test_variant_sku_taken_by_other_product_variant_maps_to_409(auth_client, make_product):
    holder = make_product(format="variants", sku=None)
    ProductVariant.objects.create(product=holder, sku="CAM-P")

    with patch.object(SkuUniquenessValidator, "validate", return_value=ValidationResult.ok()):
        response = auth_client.post(
            "/api/v1/products/upsert/",
            {"product": {"product_name": "Outra", "format": "variants"}, "variants": [{"sku": "CAM-P"}]},
            format="json",
        )

    assert response.status_code == 409
    assert response.json()["details"]["collisionProductId"] == str(holder.id)


def test_simple_sku_taken_by_variant_maps_to_409(auth_client, make_product):
    holder = make_product(format="variants", sku=None)
    ProductVariant.objects.create(product=holder, sku="CAM-P")

    with patch.object(SkuUniquenessValidator, "validate", return_value=ValidationResult.ok()):
        response = auth_client.post(
            "/api/v1/products/upsert/",
            {"product": {"product_name": "Avulsa", "sku": "cam-p"}},
            format="json",
        )

    assert response.status_code == 409
    assert response.json()["code"] == "SKU_DUPLICATE"


def test_archived_product_releases_variant_skus(auth_client, make_product):
    holder = make_product(format="variants", sku=None)
    ProductVariant.objects.create(product=holder, sku="CAM-P")
    holder.delete()

    response = auth_client.post(
        "/api/v1/products/upsert/",
        {"product": {"product_name": "Avulsa", "sku": "CAM-P"}},
        format="json",
    )

    assert response.status_code == 201
    assert ProductSku.objects.get(sku="CAM-P").product_id != holder.id


def test_ad_title_constraint_maps_to_409(auth_client, make_product):
    product = make_product()
    auth_client.post(
        "/api/v1/ad-titles/", {"product_id": str(product.id), "title": "Monitor"}, format="json"
    )

    with patch.object(
        AdTitleValidator, "validate_title_not_duplicate", return_value=ValidationResult.ok()
    ):
        response = auth_client.post(
            "/api/v1/ad-titles/", {"product_id": str(product.id), "title": "MONITOR"}, format="json"
        )

    assert response.status_code == 409
    assert response.json()["details"] == {"title": "MONITOR", "scope": "database"}


def test_second_open_incident_loses_quietly():
    repo = NotificationDjangoRepository()
    product_id = uuid.uuid4()
    key = f"STOCK_LOW:product={product_id}:variant=none"

    def _incident():
        return Notification(
            user_id=SELLER_ID, type="STOCK_LOW", product_id=product_id, dedupe_key=key
        )

    assert repo.open(_incident()) is True
    assert repo.open(_incident()) is False
    assert Notification.objects.filter(dedupe_key=key).count() == 1


def test_concurrent_preference_insert_updates_winner():
    UserPreference.objects.create(user_id=SELLER_ID, key="modal_stock", value={"v": 1})

    saved = PreferenceDjangoRepository().save(
        UserPreference(user_id=SELLER_ID, key="modal_stock", value={"v": 2})
    )

    assert UserPreference.objects.get(user_id=SELLER_ID, key="modal_stock").value == {"v": 2}
    assert UserPreference.objects.count() == 1
    assert saved.value == {"v": 2}


@pytest.mark.django_db(transaction=True)
def test_threaded_sku_race_has_one_winner(seller):
    """Two real connections insert the same SKU at the same moment."""
    from django.db import connection

    if connection.vendor == "sqlite":
        pytest.skip("SQLite serializes writers; needs a server database")

    import threading

    from django.db import connections
    from rest_framework.test import APIClient

    barrier = threading.Barrier(2)
    statuses: list[int] = []

    def _worker(name: str) -> None:
        client = APIClient()
        client.force_authenticate(user=seller)
        try:
            barrier.wait(timeout=5)
            response = client.post(
                "/api/v1/products/upsert/",
                {"product": {"product_name": name, "sku": "RACE-1"}},
                format="json",
            )
            statuses.append(response.status_code)
        finally:
            connections.close_all()

    with patch.object(SkuUniquenessValidator, "validate", return_value=ValidationResult.ok()):
        threads = [threading.Thread(target=_worker, args=(n,)) for n in ("A", "B")]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

    assert sorted(statuses) == [201, 409]
