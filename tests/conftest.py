"""
Shared test configuration and fixtures.

Provides an in-memory remote store with failure injection so the hybrid
store can be exercised without a Cosmos DB account.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from pathlib import Path

import pytest

from storefront_storage.catalog.types import AppState, Banner, CategoryItem, Product
from storefront_storage.exceptions import RemoteStoreError, StorageConnectionError
from storefront_storage.storage import HybridCatalogStore, LocalCacheStore, RemoteStore

logger = logging.getLogger(__name__)


class InMemoryRemoteStore(RemoteStore):
    """
    Remote store keeping rows in dictionaries.

    Operations named in `failing` raise RemoteStoreError; `failing_ids`
    makes only writes for those entity IDs fail. Setting `unreachable`
    makes every call raise StorageConnectionError. Every call is
    recorded in `calls` as (operation, entity_id).
    """

    def __init__(self) -> None:
        self.products: dict[str, Product] = {}
        self.categories: dict[str, CategoryItem] = {}
        self.banners: dict[str, Banner] = {}
        self.failing: set[str] = set()
        self.failing_ids: set[str] = set()
        self.unreachable = False
        self.calls: list[tuple[str, str | None]] = []
        self.closed = False

    def _check(self, operation: str, entity_id: str | None = None) -> None:
        self.calls.append((operation, entity_id))
        if self.unreachable:
            raise StorageConnectionError("memory://remote")
        if operation in self.failing or (entity_id is not None and entity_id in self.failing_ids):
            raise RemoteStoreError(operation, "test", entity_id)

    async def fetch_products(self) -> list[Product]:
        self._check("fetch_products")
        return list(self.products.values())

    async def fetch_categories(self) -> list[CategoryItem]:
        self._check("fetch_categories")
        return sorted(self.categories.values(), key=lambda c: c.name)

    async def fetch_banners(self) -> list[Banner]:
        self._check("fetch_banners")
        return list(self.banners.values())

    async def upsert_product(self, product: Product) -> None:
        self._check("upsert_product", product.id)
        self.products[product.id] = product

    async def upsert_category(self, category: CategoryItem) -> None:
        self._check("upsert_category", category.id)
        self.categories[category.id] = category

    async def upsert_banner(self, banner: Banner) -> None:
        self._check("upsert_banner", banner.id)
        self.banners[banner.id] = banner

    async def delete_product(self, product_id: str) -> None:
        self._check("delete_product", product_id)
        self.products.pop(product_id, None)

    async def delete_category(self, category_id: str) -> None:
        self._check("delete_category", category_id)
        self.categories.pop(category_id, None)

    async def delete_banner(self, banner_id: str) -> None:
        self._check("delete_banner", banner_id)
        self.banners.pop(banner_id, None)

    async def close(self) -> None:
        self.closed = True


def make_product(product_id: str = "p1", **overrides) -> Product:
    """Create a test product."""
    fields = {
        "id": product_id,
        "name": f"Produto {product_id}",
        "category": "Eletrônicos",
        "price": 100.0,
        "image_url": f"https://img.example.com/{product_id}.jpg",
        "affiliate_url": f"https://shop.example.com/{product_id}",
        "description": "Descrição de teste",
    }
    fields.update(overrides)
    return Product(**fields)


def make_banner(banner_id: str = "b1", **overrides) -> Banner:
    """Create a test banner."""
    fields = {
        "id": banner_id,
        "desktop_image_url": f"https://img.example.com/{banner_id}-desktop.jpg",
        "mobile_image_url": f"https://img.example.com/{banner_id}-mobile.jpg",
    }
    fields.update(overrides)
    return Banner(**fields)


def make_state() -> AppState:
    """Create a small but complete state."""
    return AppState(
        products=[
            make_product("p1", subcategory="Fones", is_best_seller=True),
            make_product("p2", category="Casa", original_price=150.0),
        ],
        favorites=["p2"],
        categories=[
            CategoryItem(id="c1", name="Eletrônicos", subcategories=["Celulares", "Fones"]),
            CategoryItem(id="c2", name="Casa", subcategories=[]),
        ],
        banners=[make_banner("b1", title="Promo", link_url="/category/Casa")],
    )


@pytest.fixture
def remote() -> InMemoryRemoteStore:
    return InMemoryRemoteStore()


@pytest.fixture
def cache_path(tmp_path: Path) -> Path:
    return tmp_path / "affiliate_store_state.json"


@pytest.fixture
def local(cache_path: Path) -> LocalCacheStore:
    return LocalCacheStore(cache_path)


@pytest.fixture
async def store(
    remote: InMemoryRemoteStore, local: LocalCacheStore
) -> AsyncIterator[HybridCatalogStore]:
    """Hybrid store over the in-memory remote and a temp cache file."""
    catalog_store = HybridCatalogStore(remote, local)
    yield catalog_store
    await catalog_store.close()
