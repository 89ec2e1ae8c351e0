import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.core.authentication import Auth0User
from modules.products.models import Product

SELLER_ID = "auth0|seller-1"
OTHER_SELLER_ID = "auth0|seller-2"


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def seller():
    return Auth0User({"sub": SELLER_ID})


@pytest.fixture()
def auth_client(seller):
    """APIClient authenticated as ``SELLER_ID``."""
    client = APIClient()
    client.force_authenticate(user=seller)
    return client


@pytest.fixture()
def other_client():
    """APIClient authenticated as a different seller."""
    client = APIClient()
    client.force_authenticate(user=Auth0User({"sub": OTHER_SELLER_ID}))
    return client


@pytest.fixture()
def make_product():
    """Factory for persisted products owned by ``SELLER_ID`` by default."""

    def _make(**overrides) -> Product:
        fields = {
            "user_id": SELLER_ID,
            "product_name": "Monitor 27",
            "sku": "MON-27",
            "format": "simple",
            "status": "draft",
        }
        fields.update(overrides)
        return Product.objects.create(**fields)

    return _make
