"""Every catalog mutation leaves an ``AuditEvent`` tagged with the trace id."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import patch

import pytest
from django.db import DatabaseError

from modules.core.models import AuditEvent
from tests.conftest import SELLER_ID

pytestmark = pytest.mark.integration


def _actions(entity_type):
    return list(
        AuditEvent.objects.filter(entity_type=entity_type).values_list("action", flat=True)
    )


def test_product_lifecycle_is_audited(auth_client):
    created = auth_client.post(
        "/api/v1/products/upsert/",
        {"product": {"product_name": "Monitor", "sku": "MON-1", "cost_price": "10"}},
        format="json",
        HTTP_X_TRACE_ID="trace-create",
    ).json()
    product_id = created["productId"]
    auth_client.post(
        "/api/v1/products/change-status/",
        {"product_id": product_id, "status": "ready"},
        format="json",
    )
    auth_client.delete(f"/api/v1/products/{product_id}/")

    assert _actions("product") == ["create", "status_change", "delete"]
    first = AuditEvent.objects.filter(entity_type="product").first()
    assert first.user_id == SELLER_ID
    assert first.entity_id == product_id
    assert first.trace_id == "trace-create"
    assert first.diff_json["after"]["sku"] == "MON-1"


def test_edit_records_diff(auth_client, make_product):
    product = make_product(cost_price=Decimal("10"))

    auth_client.post(
        "/api/v1/products/upsert/",
        {"mode": "edit", "product": {"id": str(product.id), "product_name": "Novo", "sku": "MON-27"}},
        format="json",
    )

    event = AuditEvent.objects.get(entity_type="product", action="update")
    assert event.diff_json["before"]["product_name"] == "Monitor 27"
    assert event.diff_json["after"]["product_name"] == "Novo"


def test_ad_title_and_preference_events(auth_client, make_product):
    product = make_product()
    auth_client.post(
        "/api/v1/ad-titles/", {"product_id": str(product.id), "title": "Monitor"}, format="json"
    )
    auth_client.put("/api/v1/preferences/", {"key": "modal_a", "value": {}}, format="json")
    auth_client.post("/api/v1/preferences/reset/", {"prefix": "modal"}, format="json")

    assert _actions("ad_title") == ["create"]
    assert _actions("user_preference") == ["create", "update"]
    reset = AuditEvent.objects.filter(entity_type="user_preference").last()
    assert reset.diff_json == {
        "action": "reset_preferences",
        "prefix": "modal",
        "count": 1,
        "keys": ["modal_a"],
    }


def test_failed_validation_writes_nothing(auth_client, make_product):
    product = make_product(status="published")

    auth_client.post(
        "/api/v1/products/change-status/",
        {"product_id": str(product.id), "status": "draft"},
        format="json",
    )

    assert not AuditEvent.objects.exists()


def test_audit_failure_does_not_fail_request(auth_client):
    with patch("modules.core.audit.AuditEvent.objects.create", side_effect=DatabaseError("down")):
        response = auth_client.post(
            "/api/v1/products/upsert/",
            {"product": {"product_name": "Monitor", "sku": "MON-9"}},
            format="json",
        )

    assert response.status_code == 201
    assert not AuditEvent.objects.exists()
