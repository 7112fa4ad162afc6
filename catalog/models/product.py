# catalog/models/product.py
from __future__ import annotations
from dataclasses import dataclass, asdict, replace
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional
import math

from catalog.core.errors import InvalidProductStatus


class ProductStatus(str, Enum):
    IN_STOCK = "IN_STOCK"
    OUT_OF_STOCK = "OUT_OF_STOCK"
    PREORDER = "PREORDER"
    DISCONTINUED = "DISCONTINUED"

    @classmethod
    def parse(cls, label: Any) -> "ProductStatus":
        """
        Resolve a status from its exact (case-sensitive) name.
        Raises InvalidProductStatus for anything else, including None and "".
        """
        if isinstance(label, cls):
            return label
        if not isinstance(label, str) or label not in cls.__members__:
            raise InvalidProductStatus(label)
        return cls.__members__[label]


# camelCase aliases accepted by from_dict and merge (rows exported by other tools)
_ALIASES = {
    "quantityInStock": "quantity_in_stock",
    "dateAdded": "date_added",
    "dateModified": "date_modified",
}


def _blank(v: Any) -> bool:
    if v is None:
        return True
    if isinstance(v, float) and math.isnan(v):
        return True
    return isinstance(v, str) and v.strip() == ""


def _to_int(v: Any) -> Optional[int]:
    if _blank(v):
        return None
    if isinstance(v, int):
        return v
    # stored tables may hand back "10" or "10.0"
    f = float(v)
    if not f.is_integer():
        raise ValueError(f"Not an integer: {v!r}")
    return int(f)


def _to_decimal(v: Any) -> Optional[Decimal]:
    if _blank(v):
        return None
    if isinstance(v, Decimal):
        value = v
    else:
        try:
            value = Decimal(str(v).strip())
        except InvalidOperation:
            raise ValueError(f"Not a decimal: {v!r}")
    if not value.is_finite():
        raise ValueError(f"Not a finite decimal: {v!r}")
    return value


def _to_float(v: Any) -> Optional[float]:
    if _blank(v):
        return None
    return float(v)


def _to_datetime(v: Any) -> Optional[datetime]:
    if _blank(v):
        return None
    if isinstance(v, datetime):
        return v
    return datetime.fromisoformat(str(v).strip())


def _to_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    if isinstance(v, float) and math.isnan(v):
        return None
    return str(v)


def _to_text(v: Any) -> Optional[str]:
    # optional text columns read back from CSV come as "" when empty
    s = _to_str(v)
    return s if s else None


def _to_status(v: Any) -> Optional[ProductStatus]:
    return None if _blank(v) else ProductStatus.parse(v)


_CONVERTERS: Dict[str, Callable[[Any], Any]] = {
    "id": _to_int,
    "title": _to_str,
    "keywords": _to_text,
    "description": _to_text,
    "rating": _to_int,
    "quantity_in_stock": _to_int,
    "dimensions": _to_text,
    "price": _to_decimal,
    "status": _to_status,
    "weight": _to_float,
    "date_added": _to_datetime,
    "date_modified": _to_datetime,
}


@dataclass
class Product:
    """
    Product record. Optional fields stay None when absent: the validator treats
    "absent" and "present but out of range" differently, so blanks are never
    replaced with 0 or "".
    """
    id: Optional[int] = None
    title: Optional[str] = None
    keywords: Optional[str] = None
    description: Optional[str] = None
    rating: Optional[int] = None
    quantity_in_stock: Optional[int] = None
    dimensions: Optional[str] = None
    price: Optional[Decimal] = None
    status: Optional[ProductStatus] = None
    weight: Optional[float] = None
    date_added: Optional[datetime] = None
    date_modified: Optional[datetime] = None

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Product":
        if d is None:
            raise ValueError("Cannot construct Product from None")
        data = {_ALIASES.get(k, k): v for k, v in d.items()}
        return cls(**{name: convert(data.get(name)) for name, convert in _CONVERTERS.items()})

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["price"] = str(self.price) if self.price is not None else None
        out["status"] = self.status.value if self.status is not None else None
        for key in ("date_added", "date_modified"):
            value = getattr(self, key)
            out[key] = value.isoformat() if value is not None else None
        return out

    def merge(self, changes: Mapping[str, Any]) -> "Product":
        """
        Return a copy with every non-None value of `changes` applied, converted
        the same way from_dict converts stored rows. Unknown keys are ignored
        and the id is never overwritten.
        """
        updates = {}
        for key, raw in changes.items():
            name = _ALIASES.get(key, key)
            if name == "id" or name not in _CONVERTERS:
                continue
            value = _CONVERTERS[name](raw)
            if value is not None:
                updates[name] = value
        return replace(self, **updates)
