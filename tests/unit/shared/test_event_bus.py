"""Unit tests for the in-memory event bus."""

from __future__ import annotations

import uuid
from unittest.mock import MagicMock

import pytest

from modules.products.events import ProductArchived, ProductCreated
from shared.domain.events import DomainEvent
from shared.infrastructure.bus import InMemoryEventBus

pytestmark = pytest.mark.unit


@pytest.fixture()
def bus():
    return InMemoryEventBus()


def test_handler_receives_subscribed_event(bus):
    handler = MagicMock()
    bus.subscribe(ProductCreated, handler)
    event = ProductCreated(aggregate_id=uuid.uuid4())

    bus.publish(event)

    handler.handle.assert_called_once_with(event)


def test_base_class_subscription_receives_subclasses(bus):
    handler = MagicMock()
    bus.subscribe(DomainEvent, handler)

    bus.publish_all(
        [ProductCreated(aggregate_id=uuid.uuid4()), ProductArchived(aggregate_id=uuid.uuid4())]
    )

    assert handler.handle.call_count == 2


def test_unrelated_handler_not_called(bus):
    handler = MagicMock()
    bus.subscribe(ProductArchived, handler)

    bus.publish(ProductCreated(aggregate_id=uuid.uuid4()))

    handler.handle.assert_not_called()


def test_subscribe_is_idempotent_and_unsubscribe(bus):
    handler = MagicMock()
    bus.subscribe(ProductCreated, handler)
    bus.subscribe(ProductCreated, handler)
    bus.publish(ProductCreated(aggregate_id=uuid.uuid4()))
    assert handler.handle.call_count == 1

    bus.unsubscribe(ProductCreated, handler)
    bus.publish(ProductCreated(aggregate_id=uuid.uuid4()))
    assert handler.handle.call_count == 1
