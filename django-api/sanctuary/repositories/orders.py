"""Order repository.

Order items and the shipping address are stored as nested JSON, so money
inside them is kept as decimal strings.
"""

from collections.abc import Mapping
from typing import Any

from sanctuary.domain import Money, Order, OrderItem, OrderStatus, ShippingAddress
from sanctuary.repositories.base import Repository
from sanctuary.stores import collections
from sanctuary.stores.interfaces import Filter, OrderBy, Snapshot


class OrderRepository(Repository[Order]):
    collection = collections.ORDERS

    def from_snapshot(self, snapshot: Snapshot) -> Order:
        data = snapshot.data
        return Order(
            id=snapshot.id,
            user_id=data["user_id"],
            user_email=data["user_email"],
            user_name=data["user_name"],
            items=tuple(
                OrderItem(
                    product_id=item["product_id"],
                    product_name=item["product_name"],
                    price=Money.of(item["price"]),
                    quantity=int(item["quantity"]),
                    image=item.get("image") or "",
                )
                for item in data.get("items") or []
            ),
            total=Money.of(data["total"]),
            status=OrderStatus(data.get("status") or OrderStatus.PENDING.value),
            shipping_address=ShippingAddress(**data["shipping_address"]),
            payment_method=data["payment_method"],
            payment_id=data.get("payment_id"),
            notes=data.get("notes") or "",
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    def to_document(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        document = dict(fields)
        if "items" in document:
            document["items"] = [
                {**item, "price": str(item["price"])} for item in document["items"]
            ]
        if "shipping_address" in document:
            document["shipping_address"] = dict(document["shipping_address"])
        return document

    def list_all(self) -> list[Order]:
        return self.list(order_by=[OrderBy("created_at", descending=True)])

    def list_for_user(self, user_id: str) -> list[Order]:
        return self.list(
            filters=[Filter("user_id", "==", user_id)],
            order_by=[OrderBy("created_at", descending=True)],
        )

    def list_recent(self, limit: int = 10) -> list[Order]:
        return self.list(order_by=[OrderBy("created_at", descending=True)], limit=limit)
