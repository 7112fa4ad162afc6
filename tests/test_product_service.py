from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from unittest.mock import Mock

import pydantic
import pytest

from catalog.core.errors import InvalidProductStatus, ProductNotFound
from catalog.core.validation import validate
from catalog.models.product import Product, ProductStatus
from catalog.repositories.product import InMemoryProductRepository, ProductRepository
from catalog.schemas.product import ProductPatch
from catalog.services.product import ProductService


@pytest.fixture
def repo_mock():
    return Mock(spec=ProductRepository)


@pytest.fixture
def service():
    return ProductService(InMemoryProductRepository())


def test_valid_product_end_to_end(repo_mock):
    product = Product(
        title="ValidTitle",
        quantity_in_stock=10,
        price=Decimal("10"),
        status=ProductStatus.IN_STOCK,
        date_added=datetime.now(),
    )
    assert validate(product) == set()

    stored = Product(**vars(product))
    repo_mock.save.return_value = stored
    saved = ProductService(repo_mock).save(product)

    assert saved is stored
    assert saved == product


def test_save_returns_repository_result_unchanged(repo_mock, make_product):
    product = make_product()
    other = make_product(id=42, title="Something else")
    repo_mock.save.return_value = other
    assert ProductService(repo_mock).save(product) is other
    repo_mock.save.assert_called_once_with(product)


def test_save_does_not_validate(repo_mock, make_product):
    invalid = make_product(price=Decimal("0"), title=None)
    repo_mock.save.return_value = invalid
    assert ProductService(repo_mock).save(invalid) is invalid


def test_save_propagates_repository_errors(repo_mock, make_product):
    repo_mock.save.side_effect = OSError("disk full")
    with pytest.raises(OSError, match="disk full"):
        ProductService(repo_mock).save(make_product())
    assert repo_mock.save.call_count == 1


def test_save_assigns_ids(service, make_product):
    first = service.save(make_product(id=None))
    second = service.save(make_product(id=None, title="Second"))
    assert (first.id, second.id) == (1, 2)
    assert service.find_all() == [first, second]


def test_update_replaces_stored_product(service, make_product):
    saved = service.save(make_product(id=None, rating=5))
    updated = service.update(replace(saved, rating=9))
    assert updated.rating == 9
    assert service.find_one(saved.id).rating == 9


def test_returned_products_do_not_alias_the_store(service, make_product):
    saved = service.save(make_product(id=None, rating=5))
    saved.rating = 1
    found = service.find_one(saved.id)
    assert found.rating == 5
    found.rating = 2
    service.find_all()[0].rating = 3
    assert service.find_one(saved.id).rating == 5


def test_partial_update_converts_mapping_values(make_product, file_repository):
    service = ProductService(file_repository)
    saved = service.save(make_product(id=None))
    updated = service.partial_update(saved.id, {"dateAdded": "2024-01-01T00:00:00", "rating": "5", "weight": "0.5"})
    assert updated.date_added == datetime(2024, 1, 1)
    assert updated.rating == 5
    assert validate(updated) == set()
    assert service.find_one(saved.id) == updated


def test_partial_update_with_patch(service, make_product):
    saved = service.save(make_product(id=None, keywords="old"))
    patch = ProductPatch(rating=3, quantityInStock=0)
    updated = service.partial_update(saved.id, patch)
    assert updated.rating == 3
    assert updated.quantity_in_stock == 0
    assert updated.keywords == "old"
    assert service.find_one(saved.id) == updated


def test_partial_update_with_mapping(service, make_product):
    saved = service.save(make_product(id=None))
    updated = service.partial_update(saved.id, {"status": "OUT_OF_STOCK"})
    assert updated.status is ProductStatus.OUT_OF_STOCK


def test_partial_update_unknown_status_label(service, make_product):
    saved = service.save(make_product(id=None))
    with pytest.raises(InvalidProductStatus):
        service.partial_update(saved.id, {"status": "INVALID"})
    with pytest.raises(pydantic.ValidationError):
        ProductPatch(status="INVALID")


def test_partial_update_missing_product(service):
    assert service.partial_update(123, ProductPatch(rating=2)) is None


def test_find_one_missing(service):
    assert service.find_one(5) is None


def test_delete(service, make_product):
    saved = service.save(make_product(id=None))
    service.delete(saved.id)
    assert service.find_one(saved.id) is None
    with pytest.raises(ProductNotFound):
        service.delete(saved.id)


def test_patch_changes_excludes_unset_fields():
    patch = ProductPatch(title="Lamp", price="12.50")
    assert patch.changes() == {"title": "Lamp", "price": Decimal("12.50")}


def test_in_memory_find_all_is_safe_during_concurrent_saves(make_product):
    repo = InMemoryProductRepository()

    def work(i):
        repo.save(make_product(id=None, title=f"Item {i}"))
        return len(repo.find_all())

    with ThreadPoolExecutor(max_workers=8) as pool:
        counts = list(pool.map(work, range(200)))
    assert max(counts) == 200
    assert [p.id for p in repo.find_all()] == list(range(1, 201))
