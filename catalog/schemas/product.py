# catalog/schemas/product.py
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from catalog.models.product import ProductStatus


class ProductPatch(BaseModel):
    """
    Partial update payload. Only fields that are set (non-null) are applied;
    constraint checks happen afterwards on the merged product.
    An unknown status label is rejected here, at parse time.
    """
    title: Optional[str] = None
    keywords: Optional[str] = None
    description: Optional[str] = None
    rating: Optional[int] = None
    quantity_in_stock: Optional[int] = Field(None, alias="quantityInStock")
    dimensions: Optional[str] = None
    price: Optional[Decimal] = None
    status: Optional[ProductStatus] = None
    weight: Optional[float] = None
    date_added: Optional[datetime] = Field(None, alias="dateAdded")
    date_modified: Optional[datetime] = Field(None, alias="dateModified")

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
