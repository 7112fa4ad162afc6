from typing import Any


class InvalidProductStatus(ValueError):
    """Raised when a status label is not one of the ProductStatus names."""

    def __init__(self, label: Any):
        self.label = label
        super().__init__(f"No ProductStatus named {label!r}")


class ProductNotFound(LookupError):
    def __init__(self, product_id: Any):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")
