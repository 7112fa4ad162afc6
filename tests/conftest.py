# tests/conftest.py
import os
import sys
from datetime import datetime
from decimal import Decimal

import pytest

# ensure project root is importable
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from catalog.database import FileBackedDB  # noqa: E402
from catalog.models.product import Product, ProductStatus  # noqa: E402
from catalog.repositories.product import FileBackedProductRepository  # noqa: E402


@pytest.fixture
def make_product():
    """
    Return a callable building a valid product; keyword arguments override
    single fields (pass None to make a field absent).
    Usage: p = make_product(rating=0)
    """
    def _fn(**overrides):
        values = dict(
            id=1,
            title="Valid Title",
            keywords=None,
            description=None,
            rating=5,
            quantity_in_stock=10,
            dimensions="10x10x10",
            price=Decimal("10"),
            status=ProductStatus.IN_STOCK,
            weight=1.0,
            date_added=datetime.now(),
            date_modified=None,
        )
        values.update(overrides)
        return Product(**values)
    return _fn


@pytest.fixture
def file_db(tmp_path):
    """FileBackedDB rooted in a per-test temporary directory."""
    return FileBackedDB(tmp_path / "data")


@pytest.fixture
def file_repository(file_db):
    return FileBackedProductRepository(file_db)
