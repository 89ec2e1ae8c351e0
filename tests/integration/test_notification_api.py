"""Integration tests for the stock-minimum job and the notification inbox."""

from __future__ import annotations

import uuid

import pytest
from django.utils import timezone

from modules.notifications.models import Notification
from modules.products.models import Product, ProductVariant
from tests.conftest import OTHER_SELLER_ID, SELLER_ID

pytestmark = pytest.mark.integration

JOB_URL = "/api/v1/jobs/stock-min-check/"
LIST_URL = "/api/v1/notifications/"
MARK_READ_URL = "/api/v1/notifications/mark-read/"


def _notification(user_id=SELLER_ID, **fields):
    product_id = fields.pop("product_id", uuid.uuid4())
    return Notification.objects.create(
        user_id=user_id,
        type="STOCK_LOW",
        product_id=product_id,
        dedupe_key=fields.pop("dedupe_key", f"STOCK_LOW:product={product_id}:variant=none"),
        **fields,
    )


class TestStockCheckJob:
    def test_opens_incident_for_low_stock(self, api_client, make_product):
        product = make_product(stock_quantity=1, stock_minimum=5)
        make_product(sku="OK-1", stock_quantity=10, stock_minimum=5)
        make_product(sku="NO-MIN", stock_quantity=0)

        response = api_client.post(JOB_URL)

        assert response.status_code == 200
        data = response.json()
        assert (data["ok"], data["created"], data["resolved"]) == (True, 1, 0)
        assert data["traceId"] == response["X-Trace-ID"]
        notification = Notification.objects.get()
        assert notification.user_id == SELLER_ID
        assert notification.product_id == product.id
        assert notification.payload == {
            "currentStock": 1,
            "minStock": 5,
            "scope": "product",
            "productId": str(product.id),
        }

    def test_second_run_is_idempotent(self, api_client, make_product):
        make_product(stock_quantity=1, stock_minimum=5)

        api_client.post(JOB_URL)
        data = api_client.post(JOB_URL).json()

        assert data["created"] == 0
        assert Notification.objects.count() == 1

    def test_resolves_when_restocked(self, api_client, make_product):
        product = make_product(stock_quantity=1, stock_minimum=5)
        api_client.post(JOB_URL)
        product.stock_quantity = 20
        product.save()

        data = api_client.get(JOB_URL).json()

        assert data["resolved"] == 1
        assert Notification.objects.get().resolved_at is not None

    def test_reopens_after_resolution(self, api_client, make_product):
        product = make_product(stock_quantity=1, stock_minimum=5)
        api_client.post(JOB_URL)
        Product.objects.filter(pk=product.pk).update(stock_quantity=9)
        api_client.post(JOB_URL)
        Product.objects.filter(pk=product.pk).update(stock_quantity=0)

        data = api_client.post(JOB_URL).json()

        assert data["created"] == 1
        assert Notification.objects.count() == 2
        assert Notification.objects.filter(resolved_at__isnull=True).count() == 1

    def test_variant_incident(self, api_client, make_product):
        product = make_product(format="variants", sku=None)
        variant = ProductVariant.objects.create(
            product=product, sku="V-1", stock_quantity=0, min_stock_quantity=2
        )

        data = api_client.post(JOB_URL).json()

        assert data["created"] == 1
        notification = Notification.objects.get()
        assert notification.variant_id == variant.id
        assert notification.dedupe_key == f"STOCK_LOW:product={product.id}:variant={variant.id}"

    def test_variant_incident_resolves_after_edit_restocks(self, api_client, auth_client):
        created = auth_client.post(
            "/api/v1/products/upsert/",
            {
                "product": {"product_name": "Camiseta", "format": "variants"},
                "variants": [{"sku": "cam-p", "stock_quantity": 1, "stock_minimum": 5}],
            },
            format="json",
        )
        product_id = created.json()["productId"]
        variant_id = ProductVariant.objects.get(product_id=product_id).id
        assert api_client.post(JOB_URL).json()["created"] == 1

        auth_client.post(
            "/api/v1/products/upsert/",
            {
                "mode": "edit",
                "product": {"id": product_id, "product_name": "Camiseta", "format": "variants"},
                "variants": [{"sku": "CAM-P", "stock_quantity": 50, "stock_minimum": 5}],
            },
            format="json",
        )
        data = api_client.post(JOB_URL).json()

        assert ProductVariant.objects.get(product_id=product_id).id == variant_id
        assert (data["created"], data["resolved"]) == (0, 1)
        assert not Notification.objects.filter(resolved_at__isnull=True).exists()

    def test_removed_variant_incident_is_resolved(self, api_client, auth_client):
        created = auth_client.post(
            "/api/v1/products/upsert/",
            {
                "product": {"product_name": "Camiseta", "format": "variants"},
                "variants": [
                    {"sku": "CAM-P", "stock_quantity": 0, "stock_minimum": 2},
                    {"sku": "CAM-M", "stock_quantity": 9, "stock_minimum": 2},
                ],
            },
            format="json",
        )
        product_id = created.json()["productId"]
        api_client.post(JOB_URL)

        auth_client.post(
            "/api/v1/products/upsert/",
            {
                "mode": "edit",
                "product": {"id": product_id, "product_name": "Camiseta", "format": "variants"},
                "variants": [{"sku": "CAM-M", "stock_quantity": 9, "stock_minimum": 2}],
            },
            format="json",
        )

        incident = Notification.objects.get()
        assert incident.resolved_at is not None
        assert api_client.post(JOB_URL).json()["created"] == 0

    def test_archived_products_ignored(self, api_client, make_product):
        make_product(stock_quantity=1, stock_minimum=5).delete()
        assert api_client.post(JOB_URL).json()["created"] == 0

    def test_wrong_secret(self, api_client, settings):
        settings.JOB_SECRET = "s3cr3t"

        response = api_client.post(JOB_URL, HTTP_X_JOB_SECRET="nope")

        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHORIZED"

    def test_missing_secret(self, api_client, settings):
        settings.JOB_SECRET = "s3cr3t"
        assert api_client.post(JOB_URL).status_code == 401

    def test_valid_secret(self, api_client, settings):
        settings.JOB_SECRET = "s3cr3t"
        response = api_client.post(JOB_URL, HTTP_X_JOB_SECRET="s3cr3t")
        assert response.status_code == 200


class TestInbox:
    def test_list_scoped_to_user(self, auth_client):
        mine = _notification()
        _notification(user_id=OTHER_SELLER_ID)

        data = auth_client.get(LIST_URL).json()

        assert data["ok"] is True
        assert [n["id"] for n in data["notifications"]] == [str(mine.id)]

    def test_filters(self, auth_client):
        _notification(read_at=timezone.now())
        _notification(resolved_at=timezone.now())
        fresh = _notification()

        unread = auth_client.get(LIST_URL, {"unread": "1"}).json()["notifications"]
        active = auth_client.get(LIST_URL, {"active": "1"}).json()["notifications"]

        assert len(unread) == 2
        assert len(active) == 2
        assert str(fresh.id) in {n["id"] for n in unread} & {n["id"] for n in active}

    def test_limit(self, auth_client):
        for _ in range(3):
            _notification()
        data = auth_client.get(LIST_URL, {"limit": "2"}).json()
        assert len(data["notifications"]) == 2

    def test_requires_auth(self, api_client):
        assert api_client.get(LIST_URL).status_code == 401


class TestMarkRead:
    def test_mark_selected(self, auth_client):
        first = _notification()
        second = _notification()

        response = auth_client.post(
            MARK_READ_URL, {"ids": [str(first.id), "not-a-uuid"]}, format="json"
        )

        assert response.json() == {"ok": True, "count": 1}
        second.refresh_from_db()
        assert second.read_at is None

    def test_mark_all(self, auth_client):
        _notification()
        _notification()
        foreign = _notification(user_id=OTHER_SELLER_ID)

        response = auth_client.post(MARK_READ_URL, {"all": True}, format="json")

        assert response.json()["count"] == 2
        foreign.refresh_from_db()
        assert foreign.read_at is None

    def test_other_users_ids_are_ignored(self, auth_client):
        foreign = _notification(user_id=OTHER_SELLER_ID)
        response = auth_client.post(MARK_READ_URL, {"ids": [str(foreign.id)]}, format="json")
        assert response.json()["count"] == 0

    def test_requires_ids_or_all(self, auth_client):
        response = auth_client.post(MARK_READ_URL, {}, format="json")
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"
