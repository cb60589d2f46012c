"""
Storefront Storage

State synchronization layer for an affiliate catalog storefront.

Provides:
- Catalog entities (products, categories, banners) and the AppState snapshot
- A local JSON cache mirrored on every state change
- A Cosmos DB remote store, one container per entity type
- A hybrid store applying mutations optimistically and propagating them
  to the remote store in the background

Usage:

    >>> from storefront_storage import HybridCatalogStore, StorageConfig
    >>> store = HybridCatalogStore.from_config(StorageConfig.from_environment())
    >>> await store.load_data()
    >>> store.subscribe(render)
    >>> store.add_category("Esportes")
    ...
    >>> await store.push_all(confirm=ask_admin)
    >>> await store.close()
"""

from .catalog import (
    ALL_CATEGORIES,
    MAX_FEATURED_PRODUCTS,
    AppState,
    Banner,
    CategoryItem,
    DescriptionGenerator,
    Product,
)
from .exceptions import (
    AuthenticationError,
    EntityNotFoundError,
    FeaturedLimitError,
    RemoteStoreError,
    StorageConnectionError,
    StorageIOError,
    StorefrontStorageError,
    SyncError,
    ValidationError,
)
from .id_utils import new_entity_id
from .logging_utils import configure_structured_logging
from .storage import (
    CosmosAuthMethod,
    CosmosRemoteStore,
    HybridCatalogStore,
    LoadSource,
    LocalCacheStore,
    RemoteStore,
    StorageConfig,
)

__all__ = [
    # Catalog
    "AppState",
    "Banner",
    "CategoryItem",
    "Product",
    "ALL_CATEGORIES",
    "MAX_FEATURED_PRODUCTS",
    "DescriptionGenerator",
    "new_entity_id",
    "configure_structured_logging",
    # Storage
    "StorageConfig",
    "CosmosAuthMethod",
    "RemoteStore",
    "CosmosRemoteStore",
    "LocalCacheStore",
    "HybridCatalogStore",
    "LoadSource",
    # Exceptions
    "StorefrontStorageError",
    "StorageIOError",
    "RemoteStoreError",
    "StorageConnectionError",
    "AuthenticationError",
    "SyncError",
    "ValidationError",
    "FeaturedLimitError",
    "EntityNotFoundError",
]

__version__ = "0.1.0"
