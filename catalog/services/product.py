from typing import Any, List, Mapping, Optional, Union
import logging

from catalog.core.errors import ProductNotFound
from catalog.models.product import Product
from catalog.repositories.product import ProductRepository
from catalog.schemas.product import ProductPatch

logger = logging.getLogger(__name__)


class ProductService:
    """
    Service layer over a ProductRepository. It performs no validation of its
    own: callers run catalog.core.validation.validate first. Repository errors
    propagate unchanged.
    """

    def __init__(self, repository: ProductRepository):
        self.repository = repository

    def save(self, product: Product) -> Product:
        """Persist `product` and return exactly what the repository returns."""
        logger.debug("Request to save Product : %s", product)
        return self.repository.save(product)

    def update(self, product: Product) -> Product:
        logger.debug("Request to update Product : %s", product)
        return self.repository.save(product)

    def partial_update(self, product_id: int,
                       patch: Union[ProductPatch, Mapping[str, Any]]) -> Optional[Product]:
        """
        Apply the non-null fields of `patch` to the stored product and save it.
        Returns None when there is no product with `product_id`.
        """
        logger.debug("Request to partially update Product %s : %s", product_id, patch)
        existing = self.repository.find_by_id(product_id)
        if existing is None:
            return None
        changes = patch.changes() if isinstance(patch, ProductPatch) else dict(patch)
        return self.repository.save(existing.merge(changes))

    def find_all(self) -> List[Product]:
        logger.debug("Request to get all Products")
        return self.repository.find_all()

    def find_one(self, product_id: int) -> Optional[Product]:
        logger.debug("Request to get Product : %s", product_id)
        return self.repository.find_by_id(product_id)

    def delete(self, product_id: int) -> None:
        logger.debug("Request to delete Product : %s", product_id)
        if not self.repository.delete_by_id(product_id):
            raise ProductNotFound(product_id)
