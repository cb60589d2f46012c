"""
Storage configuration and the remote store contract.

Defines the settings shared by the local cache and the remote store,
and the interface every remote store implementation provides.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from ..catalog.types import Banner, CategoryItem, Product

CACHE_KEY = "affiliate_store_state"


class CosmosAuthMethod(Enum):
    """Authentication method for Cosmos DB.

    KEY: Use connection string or key
    DEFAULT_CREDENTIAL: Use Azure DefaultAzureCredential (recommended)
        - Works with Azure CLI, Managed Identity, Environment variables, etc.
    MANAGED_IDENTITY: Use Azure Managed Identity explicitly
    SERVICE_PRINCIPAL: Use Service Principal with client_id/client_secret
    """

    KEY = "key"
    DEFAULT_CREDENTIAL = "default_credential"
    MANAGED_IDENTITY = "managed_identity"
    SERVICE_PRINCIPAL = "service_principal"


@dataclass
class StorageConfig:
    """Configuration for the storefront stores.

    Configuration can be provided directly or via environment variables:

    Environment Variables:
        STOREFRONT_COSMOS_ENDPOINT: Cosmos DB endpoint URL
        STOREFRONT_COSMOS_KEY: Cosmos DB key (if using key auth)
        STOREFRONT_COSMOS_DATABASE: Database name (default: storefront-db)
        STOREFRONT_COSMOS_AUTH_METHOD: Auth method (default: default_credential)
        STOREFRONT_PRODUCTS_CONTAINER: Products table (default: products)
        STOREFRONT_CATEGORIES_CONTAINER: Categories table (default: categories)
        STOREFRONT_BANNERS_CONTAINER: Banners table (default: banners)
        STOREFRONT_CACHE_PATH: Local cache file path
        AZURE_TENANT_ID: Azure tenant ID (for service principal)
        AZURE_CLIENT_ID: Azure client ID (for service principal/managed identity)
        AZURE_CLIENT_SECRET: Azure client secret (for service principal)

    Attributes:
        cosmos_endpoint: Cosmos DB endpoint URL; None means no remote store
        cosmos_auth_method: Authentication method (default: DEFAULT_CREDENTIAL)
        cosmos_key: Cosmos DB key (only for KEY auth method)
        cosmos_database: Cosmos DB database name
        products_container: Container holding product rows
        categories_container: Container holding category rows
        banners_container: Container holding banner rows

        azure_tenant_id: Azure tenant ID (for SERVICE_PRINCIPAL)
        azure_client_id: Azure client/app ID (for SERVICE_PRINCIPAL/MANAGED_IDENTITY)
        azure_client_secret: Azure client secret (for SERVICE_PRINCIPAL)

        cache_path: Path of the local cache file
    """

    # Cosmos DB connection settings
    cosmos_endpoint: str | None = None
    cosmos_auth_method: CosmosAuthMethod = CosmosAuthMethod.DEFAULT_CREDENTIAL
    cosmos_key: str | None = None
    cosmos_database: str = "storefront-db"
    products_container: str = "products"
    categories_container: str = "categories"
    banners_container: str = "banners"

    # Azure AD authentication settings (for SERVICE_PRINCIPAL)
    azure_tenant_id: str | None = None
    azure_client_id: str | None = None
    azure_client_secret: str | None = None

    # Local cache settings
    cache_path: str | None = None

    # Additional options
    options: dict[str, Any] = field(default_factory=dict)

    @property
    def remote_configured(self) -> bool:
        """True when a remote endpoint is set."""
        return bool(self.cosmos_endpoint)

    def resolved_cache_path(self) -> Path:
        """Local cache file, defaulting to ~/.storefront/affiliate_store_state.json."""
        if self.cache_path:
            return Path(self.cache_path)
        return Path.home() / ".storefront" / f"{CACHE_KEY}.json"

    @classmethod
    def from_environment(cls) -> StorageConfig:
        """Create configuration from environment variables.

        Returns:
            StorageConfig populated from environment variables
        """
        auth_method_str = os.environ.get("STOREFRONT_COSMOS_AUTH_METHOD", "default_credential")
        try:
            auth_method = CosmosAuthMethod(auth_method_str.lower())
        except ValueError:
            auth_method = CosmosAuthMethod.DEFAULT_CREDENTIAL

        return cls(
            cosmos_endpoint=os.environ.get("STOREFRONT_COSMOS_ENDPOINT") or None,
            cosmos_auth_method=auth_method,
            cosmos_key=os.environ.get("STOREFRONT_COSMOS_KEY"),
            cosmos_database=os.environ.get("STOREFRONT_COSMOS_DATABASE", "storefront-db"),
            products_container=os.environ.get("STOREFRONT_PRODUCTS_CONTAINER", "products"),
            categories_container=os.environ.get("STOREFRONT_CATEGORIES_CONTAINER", "categories"),
            banners_container=os.environ.get("STOREFRONT_BANNERS_CONTAINER", "banners"),
            azure_tenant_id=os.environ.get("AZURE_TENANT_ID"),
            azure_client_id=os.environ.get("AZURE_CLIENT_ID"),
            azure_client_secret=os.environ.get("AZURE_CLIENT_SECRET"),
            cache_path=os.environ.get("STOREFRONT_CACHE_PATH"),
        )

    @classmethod
    def from_settings_file(cls, path: Path | None = None) -> StorageConfig:
        """Create configuration from the storage section of a settings file.

        Configuration in ~/.storefront/settings.yaml:

        ```yaml
        storage:
          cosmos_endpoint: "https://my-account.documents.azure.com:443/"
          cosmos_auth_method: key
          cosmos_key: "..."
          cosmos_database: storefront-db
          cache_path: /var/lib/storefront/affiliate_store_state.json
        ```

        Missing file or section yields the defaults (no remote store).
        Unknown keys are kept in `options`.
        """
        settings_path = path or Path.home() / ".storefront" / "settings.yaml"
        if not settings_path.exists():
            return cls()

        with open(settings_path, encoding="utf-8") as f:
            settings = yaml.safe_load(f) or {}
        section = dict(settings.get("storage") or {})

        auth_method_str = str(section.pop("cosmos_auth_method", "default_credential"))
        try:
            auth_method = CosmosAuthMethod(auth_method_str.lower())
        except ValueError:
            auth_method = CosmosAuthMethod.DEFAULT_CREDENTIAL

        known = {f for f in cls.__dataclass_fields__ if f not in ("cosmos_auth_method", "options")}
        kwargs = {k: section.pop(k) for k in list(section) if k in known}
        return cls(cosmos_auth_method=auth_method, options=section, **kwargs)


class RemoteStore(ABC):
    """Abstract interface for the remote catalog store.

    Each entity type lives in its own table. Fetches return every row
    (an empty list when the table is empty); upserts insert or replace
    by ID; deletes remove by ID. Data-layer failures raise
    RemoteStoreError or one of its siblings so the caller can decide
    whether to log or surface them.
    """

    @abstractmethod
    async def fetch_products(self) -> list[Product]:
        """Fetch every product row."""
        ...

    @abstractmethod
    async def fetch_categories(self) -> list[CategoryItem]:
        """Fetch every category row, ordered by name."""
        ...

    @abstractmethod
    async def fetch_banners(self) -> list[Banner]:
        """Fetch every banner row."""
        ...

    @abstractmethod
    async def upsert_product(self, product: Product) -> None:
        """Insert or replace a product row."""
        ...

    @abstractmethod
    async def upsert_category(self, category: CategoryItem) -> None:
        """Insert or replace a category row."""
        ...

    @abstractmethod
    async def upsert_banner(self, banner: Banner) -> None:
        """Insert or replace a banner row."""
        ...

    @abstractmethod
    async def delete_product(self, product_id: str) -> None:
        """Delete a product row; a missing row is not an error."""
        ...

    @abstractmethod
    async def delete_category(self, category_id: str) -> None:
        """Delete a category row; a missing row is not an error."""
        ...

    @abstractmethod
    async def delete_banner(self, banner_id: str) -> None:
        """Delete a banner row; a missing row is not an error."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close the connection and cleanup resources."""
        ...
