"""Order service.

The order total is recomputed from the items on creation and a mismatch is
rejected. Delivered and cancelled orders are final.
"""

import logging
from collections.abc import Mapping
from typing import Any

from sanctuary.domain import Order, OrderStatus
from sanctuary.domain.errors import OrderNotFoundError, ValidationFailedError
from sanctuary.repositories import OrderRepository
from sanctuary.services.authorization import AuthorizationGate, Identity
from sanctuary.services.base import MutationService
from sanctuary.services.rate_limit import RateLimiter
from sanctuary.services.validation import OrderInputSerializer, OrderStatusSerializer, validate_input
from sanctuary.stores import collections
from sanctuary.stores.interfaces import SERVER_TIMESTAMP, DocumentStore, Transaction

logger = logging.getLogger(__name__)


class OrderService(MutationService):
    def __init__(
        self,
        store: DocumentStore,
        gate: AuthorizationGate,
        orders: OrderRepository,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        super().__init__(store, gate, rate_limiter)
        self._orders = orders

    def _load(self, tx: Transaction, order_id: str) -> Order:
        order = self._orders.get_within_transaction(tx, order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def create_order(self, identity: Identity | None, data: Mapping[str, Any]) -> str:
        identity = self._gate.require_authenticated(identity)
        fields = validate_input(OrderInputSerializer, data)
        self._throttle(identity, collections.ORDERS, "create")
        fields.update(
            user_id=identity.uid,
            status=OrderStatus.PENDING.value,
            created_at=SERVER_TIMESTAMP,
            updated_at=SERVER_TIMESTAMP,
        )
        order_id = self._transact("create order", lambda tx: self._orders.create(tx, fields))
        logger.info("Order %s placed by %s", order_id, identity.uid)
        return order_id

    def get_order(self, identity: Identity | None, order_id: str) -> Order:
        """Return an order to its owner or to an admin."""
        identity = self._gate.require_authenticated(identity)
        order = self._read("get order", lambda: self._orders.get(order_id))
        if order is None:
            raise OrderNotFoundError(order_id)
        if order.user_id != identity.uid:
            self._gate.require_admin(identity)
        return order

    def list_my_orders(self, identity: Identity | None) -> list[Order]:
        identity = self._gate.require_authenticated(identity)
        return self._read("list orders", lambda: self._orders.list_for_user(identity.uid))

    def list_orders(self, identity: Identity | None) -> list[Order]:
        self._gate.require_admin(identity)
        return self._read("list orders", self._orders.list_all)

    def list_recent(self, identity: Identity | None, limit: int = 10) -> list[Order]:
        self._gate.require_admin(identity)
        return self._read("list orders", lambda: self._orders.list_recent(limit))

    def update_order_status(self, identity: Identity | None, order_id: str, status: str) -> None:
        self._gate.require_admin(identity)
        new_status = OrderStatus(validate_input(OrderStatusSerializer, {"status": status})["status"])
        self._throttle(identity, collections.ORDERS, "update")

        def body(tx: Transaction) -> None:
            order = self._load(tx, order_id)
            if order.status.is_final and order.status is not new_status:
                raise ValidationFailedError(f"Order is already {order.status.value}")
            self._orders.update(tx, order_id, {"status": new_status.value, "updated_at": SERVER_TIMESTAMP})

        self._transact("update order", body)
        logger.info("Order %s set to %s by %s", order_id, new_status.value, identity.uid)

    def delete_order(self, identity: Identity | None, order_id: str) -> None:
        self._gate.require_admin(identity)
        self._throttle(identity, collections.ORDERS, "delete")

        def body(tx: Transaction) -> None:
            self._load(tx, order_id)
            self._orders.delete(tx, order_id)

        self._transact("delete order", body)
        logger.info("Order %s deleted by %s", order_id, identity.uid)
