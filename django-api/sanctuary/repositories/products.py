"""Product repository."""

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from sanctuary.domain import Money, Product
from sanctuary.repositories.base import Repository
from sanctuary.stores import collections
from sanctuary.stores.interfaces import Filter, OrderBy, Snapshot


def _money(value: Any) -> Money | None:
    if value is None:
        return None
    return Money.of(value)


class ProductRepository(Repository[Product]):
    collection = collections.PRODUCTS

    def from_snapshot(self, snapshot: Snapshot) -> Product:
        data = snapshot.data
        return Product(
            id=snapshot.id,
            name=data["name"],
            price=Money.of(data["price"]),
            original_price=_money(data.get("original_price")),
            category=data["category"],
            description=data["description"],
            stock=data.get("stock") or 0,
            sale=data.get("sale", False),
            featured=data.get("featured", False),
            image=data.get("image") or "",
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    def to_document(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        document = dict(fields)
        for key in ("price", "original_price"):
            if isinstance(document.get(key), Money):
                document[key] = document[key].amount
            elif isinstance(document.get(key), float):
                document[key] = Decimal(str(document[key]))
        return document

    def list_all(self) -> list[Product]:
        return self.list(order_by=[OrderBy("created_at", descending=True)])

    def list_by_category(self, category: str) -> list[Product]:
        return self.list(
            filters=[Filter("category", "==", category)],
            order_by=[OrderBy("created_at", descending=True)],
        )

    def list_featured(self, limit: int = 4) -> list[Product]:
        return self.list(
            filters=[Filter("featured", "==", True)],
            order_by=[OrderBy("created_at", descending=True)],
            limit=limit,
        )
