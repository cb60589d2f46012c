"""
Storefront storage backends.

Provides the local cache, the Cosmos DB remote store, and the hybrid
catalog store that reconciles the two.

Authentication Methods:
    For Cosmos DB, multiple authentication methods are supported:
    - KEY: Account key
    - DEFAULT_CREDENTIAL: Azure DefaultAzureCredential (recommended)
    - MANAGED_IDENTITY: Azure Managed Identity
    - SERVICE_PRINCIPAL: Service Principal with client secret

Example:
    >>> from storefront_storage.storage import HybridCatalogStore, StorageConfig
    >>> store = HybridCatalogStore.from_config(StorageConfig.from_environment())
    >>> await store.load_data()
    >>> store.toggle_favorite("1")
"""

from .base import CACHE_KEY, CosmosAuthMethod, RemoteStore, StorageConfig
from .cosmos import CosmosRemoteStore, UnconfiguredRemoteStore, create_remote_store
from .hybrid import HybridCatalogStore, LoadSource
from .local import LocalCacheStore

__all__ = [
    # Configuration
    "StorageConfig",
    "CosmosAuthMethod",
    "CACHE_KEY",
    # Storage implementations
    "RemoteStore",
    "CosmosRemoteStore",
    "UnconfiguredRemoteStore",
    "create_remote_store",
    "LocalCacheStore",
    "HybridCatalogStore",
    "LoadSource",
]
