"""Tests for OrderService.

Run with: pytest tests/test_orders.py -v
"""

import pytest

from sanctuary.domain import Money, OrderStatus
from sanctuary.domain.errors import OrderNotFoundError, PermissionDeniedError, ValidationFailedError
from sanctuary.services import Identity


@pytest.fixture
def order_input():
    def make(**overrides):
        data = {
            "user_email": "ruth@example.org",
            "user_name": "Ruth",
            "items": [
                {"product_id": "p1", "product_name": "Journal", "price": "24.99", "quantity": 2},
                {"product_id": "p2", "product_name": "Candle", "price": "5.00", "quantity": 1},
            ],
            "total": "54.98",
            "shipping_address": {
                "name": "Ruth",
                "street": "1 Church Lane",
                "city": "Bethlehem",
                "state": "PA",
                "zip": "18015",
                "country": "US",
            },
            "payment_method": "card",
        }
        data.update(overrides)
        return data

    return make


class TestOrderService:
    def test_create_order_for_caller(self, services, member, order_input):
        order_id = services.orders.create_order(member, order_input())
        order = services.orders.get_order(member, order_id)
        assert order.user_id == member.uid
        assert order.status is OrderStatus.PENDING
        assert order.total == Money.of("54.98")
        assert order.items[0].subtotal == Money.of("49.98")
        assert order.shipping_address.city == "Bethlehem"

    def test_total_must_match_items(self, services, member, order_input):
        with pytest.raises(ValidationFailedError) as exc_info:
            services.orders.create_order(member, order_input(total="10.00"))
        assert "total" in exc_info.value.errors

    def test_orders_need_items(self, services, member, order_input):
        with pytest.raises(ValidationFailedError):
            services.orders.create_order(member, order_input(items=[], total="0"))

    def test_anonymous_cannot_order(self, services, order_input):
        with pytest.raises(PermissionDeniedError):
            services.orders.create_order(None, order_input())

    def test_orders_are_private(self, services, admin, member, order_input):
        order_id = services.orders.create_order(member, order_input())
        with pytest.raises(PermissionDeniedError):
            services.orders.get_order(Identity(uid="someone-else"), order_id)
        assert services.orders.get_order(admin, order_id).id == order_id

    def test_list_my_orders(self, services, admin, member, order_input):
        services.orders.create_order(member, order_input())
        services.orders.create_order(admin, order_input())
        assert len(services.orders.list_my_orders(member)) == 1
        assert len(services.orders.list_recent(admin)) == 2
        assert len(services.orders.list_orders(admin)) == 2

    def test_admin_moves_order_through_statuses(self, services, admin, member, order_input):
        order_id = services.orders.create_order(member, order_input())
        services.orders.update_order_status(admin, order_id, "shipped")
        services.orders.update_order_status(admin, order_id, "delivered")
        assert services.orders.get_order(admin, order_id).status is OrderStatus.DELIVERED

        with pytest.raises(ValidationFailedError):
            services.orders.update_order_status(admin, order_id, "processing")

    def test_unknown_status(self, services, admin, member, order_input):
        order_id = services.orders.create_order(member, order_input())
        with pytest.raises(ValidationFailedError):
            services.orders.update_order_status(admin, order_id, "lost")

    def test_update_missing_order(self, services, admin):
        with pytest.raises(OrderNotFoundError):
            services.orders.update_order_status(admin, "missing", "shipped")

    def test_member_cannot_change_status(self, services, member, order_input):
        order_id = services.orders.create_order(member, order_input())
        with pytest.raises(PermissionDeniedError):
            services.orders.update_order_status(member, order_id, "cancelled")

    def test_delete_order(self, services, admin, member, order_input):
        order_id = services.orders.create_order(member, order_input())
        services.orders.delete_order(admin, order_id)
        with pytest.raises(OrderNotFoundError):
            services.orders.get_order(admin, order_id)
