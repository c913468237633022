"""Product service - existence-checked transactional writes for the shop."""

import logging
from collections.abc import Mapping
from typing import Any

from sanctuary.domain import Product
from sanctuary.domain.errors import ProductNotFoundError, ValidationFailedError
from sanctuary.repositories import ProductRepository
from sanctuary.services.authorization import AuthorizationGate, Identity
from sanctuary.services.base import MutationService
from sanctuary.services.rate_limit import RateLimiter
from sanctuary.services.validation import ProductInputSerializer, validate_input
from sanctuary.stores import collections
from sanctuary.stores.interfaces import SERVER_TIMESTAMP, DocumentStore, Transaction

logger = logging.getLogger(__name__)


class ProductService(MutationService):
    def __init__(
        self,
        store: DocumentStore,
        gate: AuthorizationGate,
        products: ProductRepository,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        super().__init__(store, gate, rate_limiter)
        self._products = products

    def _load(self, tx: Transaction, product_id: str) -> Product:
        product = self._products.get_within_transaction(tx, product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    def list_products(self, category: str | None = None) -> list[Product]:
        if category:
            return self._read("list products", lambda: self._products.list_by_category(category))
        return self._read("list products", self._products.list_all)

    def list_featured(self, limit: int = 4) -> list[Product]:
        return self._read("list products", lambda: self._products.list_featured(limit))

    def get_product(self, product_id: str) -> Product:
        """Return a product by ID.

        Raises:
            ProductNotFoundError: If the product does not exist.
        """
        product = self._read("get product", lambda: self._products.get(product_id))
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    def create_product(self, identity: Identity | None, data: Mapping[str, Any]) -> str:
        self._gate.require_admin(identity)
        fields = validate_input(ProductInputSerializer, data)
        self._throttle(identity, collections.PRODUCTS, "create")
        fields.update(created_at=SERVER_TIMESTAMP, updated_at=SERVER_TIMESTAMP)
        product_id = self._transact("create product", lambda tx: self._products.create(tx, fields))
        logger.info("Product %s created by %s", product_id, identity.uid)
        return product_id

    def update_product(self, identity: Identity | None, product_id: str, data: Mapping[str, Any]) -> None:
        self._gate.require_admin(identity)
        fields = validate_input(ProductInputSerializer, data, partial=True)
        self._throttle(identity, collections.PRODUCTS, "update")

        def body(tx: Transaction) -> None:
            product = self._load(tx, product_id)
            on_sale = fields.get("sale", product.sale)
            original_price = fields.get("original_price", product.original_price)
            if on_sale and original_price is None:
                raise ValidationFailedError(
                    errors={"original_price": ["Required when the product is on sale."]}
                )
            self._products.update(tx, product_id, {**fields, "updated_at": SERVER_TIMESTAMP})

        self._transact("update product", body)
        logger.info("Product %s updated by %s", product_id, identity.uid)

    def delete_product(self, identity: Identity | None, product_id: str) -> None:
        self._gate.require_admin(identity)
        self._throttle(identity, collections.PRODUCTS, "delete")

        def body(tx: Transaction) -> None:
            self._load(tx, product_id)
            self._products.delete(tx, product_id)

        self._transact("delete product", body)
        logger.info("Product %s deleted by %s", product_id, identity.uid)
