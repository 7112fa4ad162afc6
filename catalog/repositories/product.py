"""
Product persistence. `ProductRepository` is the contract the service layer
depends on; the file-backed and in-memory classes implement it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Dict, List, Optional
import logging
import threading

from catalog.database import FileBackedDB
from catalog.models.product import Product

logger = logging.getLogger(__name__)


class ProductRepository(ABC):

    @abstractmethod
    def save(self, product: Product) -> Product:
        """Persist a new or updated product and return it (with its id)."""

    @abstractmethod
    def find_by_id(self, product_id: int) -> Optional[Product]:
        """Return a product by its id, or None if not found."""

    @abstractmethod
    def find_all(self) -> List[Product]:
        """Return every stored product, ordered by id."""

    @abstractmethod
    def delete_by_id(self, product_id: int) -> bool:
        """Remove a product. Returns False when nothing was stored under the id."""

    def exists_by_id(self, product_id: int) -> bool:
        return self.find_by_id(product_id) is not None


class FileBackedProductRepository(ProductRepository):
    TABLE = "products"

    def __init__(self, db: FileBackedDB):
        self.db = db

    def save(self, product: Product) -> Product:
        if product.id is None:
            row = self.db.insert_record(self.TABLE, product.to_dict(), key="id")
            return replace(product, id=int(row["id"]))
        self.db.upsert_record(self.TABLE, product.to_dict(), key="id")
        return product

    def find_by_id(self, product_id: int) -> Optional[Product]:
        row = self.db.get_record(self.TABLE, "id", product_id)
        return Product.from_dict(row) if row else None

    def find_all(self) -> List[Product]:
        products = [Product.from_dict(r) for r in self.db.list_records(self.TABLE)]
        return sorted(products, key=lambda p: p.id or 0)

    def delete_by_id(self, product_id: int) -> bool:
        return self.db.delete_record(self.TABLE, "id", product_id)


class InMemoryProductRepository(ProductRepository):
    """
    Dict-backed repository with the same id assignment as the file store.
    Stored and returned products are separate copies, as with the file store.
    """

    def __init__(self):
        self._rows: Dict[int, Product] = {}
        self._lock = threading.Lock()

    def save(self, product: Product) -> Product:
        with self._lock:
            if product.id is None:
                next_id = max(self._rows, default=0) + 1
                product = replace(product, id=next_id)
            self._rows[product.id] = replace(product)
        return replace(product)

    def find_by_id(self, product_id: int) -> Optional[Product]:
        with self._lock:
            row = self._rows.get(product_id)
        return replace(row) if row is not None else None

    def find_all(self) -> List[Product]:
        with self._lock:
            return [replace(self._rows[k]) for k in sorted(self._rows)]

    def delete_by_id(self, product_id: int) -> bool:
        with self._lock:
            return self._rows.pop(product_id, None) is not None
