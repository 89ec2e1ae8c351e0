"""Unit tests for the stock-minimum incident rules."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from modules.notifications.stock_incidents import (
    build_dedupe_key,
    get_current_stock,
    get_min_stock,
    get_stock_scope,
    should_open_incident,
    should_resolve_incident,
)

pytestmark = pytest.mark.unit


class TestGetMinStock:
    def test_prefers_min_stock_quantity(self):
        assert get_min_stock({"min_stock_quantity": 5, "stock_minimum": 9}) == 5

    def test_falls_back_to_stock_minimum(self):
        assert get_min_stock(SimpleNamespace(min_stock_quantity=None, stock_minimum="3")) == 3

    @pytest.mark.parametrize("value", [None, "", "abc", -1])
    def test_missing_or_invalid(self, value):
        assert get_min_stock({"min_stock_quantity": value}) is None


class TestGetCurrentStock:
    def test_prefers_stock_quantity(self):
        assert get_current_stock({"stock_quantity": 4, "stock_real": 8}) == 4

    def test_falls_back_to_stock_real(self):
        assert get_current_stock({"stock_real": "8"}) == 8

    @pytest.mark.parametrize("row", [{}, {"stock_quantity": "x"}, {"stock_quantity": -3}])
    def test_defaults_to_zero(self, row):
        assert get_current_stock(row) == 0


class TestIncidentRules:
    @pytest.mark.parametrize(
        "current,minimum,expected",
        [(0, 0, True), (2, 3, True), (3, 3, True), (4, 3, False), (1, None, False), (None, 2, False)],
    )
    def test_open(self, current, minimum, expected):
        assert should_open_incident(current, minimum) is expected

    @pytest.mark.parametrize(
        "current,minimum,expected",
        [(4, 3, True), (3, 3, False), (0, 0, False), (5, None, False), (5, -1, False)],
    )
    def test_resolve(self, current, minimum, expected):
        assert should_resolve_incident(current, minimum) is expected


class TestDedupeKey:
    def test_product_only(self):
        assert build_dedupe_key("STOCK_LOW", "p-1") == "STOCK_LOW:product=p-1:variant=none"

    def test_variant_id_wins_over_key(self):
        key = build_dedupe_key("STOCK_LOW", "p-1", variant_id="v-1", variant_key="azul")
        assert key == "STOCK_LOW:product=p-1:variant=v-1"

    def test_variant_key(self):
        key = build_dedupe_key("STOCK_LOW", "p-1", variant_key="azul")
        assert key == "STOCK_LOW:product=p-1:variant=azul"


class TestStockScope:
    @pytest.mark.parametrize(
        "item,expected",
        [
            (None, "unknown"),
            ({"variant_id": "v-1", "product_id": "p-1"}, "variant:v-1"),
            ({"variant_key": "azul"}, "variant_key:azul"),
            ({"product_id": "p-1"}, "product:p-1"),
            ({"id": "p-2"}, "product:p-2"),
            ({"other": 1}, "unknown"),
        ],
    )
    def test_scope(self, item, expected):
        assert get_stock_scope(item) == expected
