"""
Cosmos DB remote store.

Stores each entity type in its own container ("table"), one document
per entity, partitioned on the entity ID. Documents use snake_case
column names; the mapping to the application's entities is total and
lossless in both directions.

Supports multiple authentication methods:
- Key-based authentication
- Azure AD via DefaultAzureCredential (recommended)
- Azure Managed Identity
- Service Principal
"""

from __future__ import annotations

import asyncio
from typing import Any

from azure.cosmos import PartitionKey
from azure.cosmos.aio import ContainerProxy, CosmosClient, DatabaseProxy
from azure.cosmos.exceptions import CosmosHttpResponseError, CosmosResourceNotFoundError

from ..catalog.types import Banner, CategoryItem, Product
from ..exceptions import (
    AuthenticationError,
    RemoteStoreError,
    StorageConnectionError,
    StorefrontStorageError,
)
from ..logging_utils import StorageLoggerAdapter, get_storage_logger
from .base import CosmosAuthMethod, RemoteStore, StorageConfig

logger = get_storage_logger("cosmos")

PRODUCTS = "products"
CATEGORIES = "categories"
BANNERS = "banners"
ENTITIES = (PRODUCTS, CATEGORIES, BANNERS)

_AUTH_STATUS_CODES = {401, 403}


# Row mapping


def product_to_row(product: Product) -> dict[str, Any]:
    """Convert a product to its remote row."""
    return {
        "id": product.id,
        "name": product.name,
        "category": product.category,
        "subcategory": product.subcategory,
        "price": product.price,
        "original_price": product.original_price,
        "image_url": product.image_url,
        "affiliate_url": product.affiliate_url,
        "description": product.description,
        "is_featured": product.is_featured or False,
        "is_best_seller": product.is_best_seller or False,
        "has_pix_discount": product.has_pix_discount or False,
        "accepts_12x": product.accepts_12x or False,
        "rating": product.rating,
        "reviews_count": product.reviews_count,
    }


def row_to_product(row: dict[str, Any]) -> Product:
    """Convert a remote row to a product, ignoring system properties."""
    original_price = row.get("original_price")
    rating = row.get("rating")
    return Product(
        id=str(row["id"]),
        name=row["name"],
        category=row["category"],
        subcategory=row.get("subcategory") or None,
        price=float(row["price"]),
        original_price=float(original_price) if original_price is not None else None,
        image_url=row.get("image_url") or "",
        affiliate_url=row.get("affiliate_url") or "",
        description=row.get("description") or "",
        is_featured=bool(row.get("is_featured")),
        is_best_seller=bool(row.get("is_best_seller")),
        has_pix_discount=bool(row.get("has_pix_discount")),
        accepts_12x=bool(row.get("accepts_12x")),
        rating=float(rating) if rating is not None else 5.0,
        reviews_count=int(row.get("reviews_count") or 0),
    )


def category_to_row(category: CategoryItem) -> dict[str, Any]:
    """Convert a category to its remote row."""
    return {
        "id": category.id,
        "name": category.name,
        "subcategories": list(category.subcategories),
    }


def row_to_category(row: dict[str, Any]) -> CategoryItem:
    """Convert a remote row to a category."""
    return CategoryItem(
        id=str(row["id"]),
        name=row["name"],
        subcategories=list(row.get("subcategories") or []),
    )


def banner_to_row(banner: Banner) -> dict[str, Any]:
    """Convert a banner to its remote row."""
    return {
        "id": banner.id,
        "title": banner.title,
        "subtitle": banner.subtitle,
        "link_url": banner.link_url,
        "desktop_image_url": banner.desktop_image_url,
        "mobile_image_url": banner.mobile_image_url,
    }


def row_to_banner(row: dict[str, Any]) -> Banner:
    """Convert a remote row to a banner."""
    return Banner(
        id=str(row["id"]),
        title=row.get("title") or None,
        subtitle=row.get("subtitle") or None,
        link_url=row.get("link_url") or None,
        desktop_image_url=row.get("desktop_image_url") or "",
        mobile_image_url=row.get("mobile_image_url") or "",
    )


def _get_credential(config: StorageConfig) -> Any:
    """Get the appropriate credential based on auth method.

    Args:
        config: Storage configuration with auth settings

    Returns:
        Credential object for Cosmos DB authentication

    Raises:
        AuthenticationError: If credential cannot be created
    """
    endpoint = config.cosmos_endpoint or "cosmos"
    auth_method = config.cosmos_auth_method

    if auth_method == CosmosAuthMethod.KEY:
        if not config.cosmos_key:
            raise AuthenticationError(endpoint, "cosmos_key required for KEY authentication")
        return config.cosmos_key

    if auth_method == CosmosAuthMethod.DEFAULT_CREDENTIAL:
        from azure.identity.aio import DefaultAzureCredential

        return DefaultAzureCredential()

    if auth_method == CosmosAuthMethod.MANAGED_IDENTITY:
        from azure.identity.aio import ManagedIdentityCredential

        # If client_id is provided, use user-assigned managed identity
        if config.azure_client_id:
            return ManagedIdentityCredential(client_id=config.azure_client_id)
        return ManagedIdentityCredential()

    if auth_method == CosmosAuthMethod.SERVICE_PRINCIPAL:
        if not all([config.azure_tenant_id, config.azure_client_id, config.azure_client_secret]):
            raise AuthenticationError(
                endpoint,
                "azure_tenant_id, azure_client_id, and azure_client_secret "
                "required for SERVICE_PRINCIPAL authentication",
            )
        from azure.identity.aio import ClientSecretCredential

        return ClientSecretCredential(
            tenant_id=config.azure_tenant_id,  # type: ignore[arg-type]
            client_id=config.azure_client_id,  # type: ignore[arg-type]
            client_secret=config.azure_client_secret,  # type: ignore[arg-type]
        )

    raise AuthenticationError(endpoint, f"Unsupported auth method: {auth_method}")


class CosmosRemoteStore(RemoteStore):
    """Cosmos DB remote store.

    Container schema (one container per entity type):
        products:   id, name, category, subcategory, price, original_price,
                    image_url, affiliate_url, description, is_featured,
                    is_best_seller, has_pix_discount, accepts_12x,
                    rating, reviews_count
        categories: id, name, subcategories[]
        banners:    id, title, subtitle, link_url,
                    desktop_image_url, mobile_image_url

    Partition key path: /id. Upserts replace the whole document, so
    writing the same entity twice leaves a single identical row.
    """

    def __init__(self, config: StorageConfig) -> None:
        """Initialize Cosmos DB storage.

        Args:
            config: Storage configuration with Cosmos connection info
        """
        if not config.cosmos_endpoint:
            raise StorefrontStorageError("Cosmos endpoint is required")

        self.config = config
        self.endpoint = config.cosmos_endpoint
        self._container_names = {
            PRODUCTS: config.products_container,
            CATEGORIES: config.categories_container,
            BANNERS: config.banners_container,
        }
        self._loggers = {
            entity: StorageLoggerAdapter(logger, {"entity": entity}) for entity in ENTITIES
        }

        self._credential: Any = None
        self._client: CosmosClient | None = None
        self._database: DatabaseProxy | None = None
        self._containers: dict[str, ContainerProxy] = {}
        self._initialized = False
        self._init_lock = asyncio.Lock()

    async def _ensure_initialized(self) -> None:
        """Ensure client, database and containers are initialized.

        Concurrent first calls share one initialization; a failed attempt
        releases whatever it created so the next call starts clean.
        """
        if self._initialized:
            return

        async with self._init_lock:
            if self._initialized:
                return

            self._credential = _get_credential(self.config)

            try:
                client = CosmosClient(self.endpoint, credential=self._credential)
                self._client = client

                database = await client.create_database_if_not_exists(
                    id=self.config.cosmos_database
                )
                self._database = database

                for entity, name in self._container_names.items():
                    self._containers[entity] = await database.create_container_if_not_exists(
                        id=name,
                        partition_key=PartitionKey(path="/id"),
                    )

                self._initialized = True
                logger.info(
                    f"Connected to Cosmos DB: {self.endpoint} "
                    f"(database={self.config.cosmos_database}, "
                    f"auth={self.config.cosmos_auth_method.value})"
                )

            except CosmosHttpResponseError as e:
                await self._release()
                if e.status_code in _AUTH_STATUS_CODES:
                    raise AuthenticationError(
                        self.endpoint,
                        "Ensure your identity has the 'Cosmos DB Data Contributor' role. "
                        f"Error: {e.message}",
                    ) from e
                raise StorageConnectionError(self.endpoint, e) from e
            except Exception as e:
                await self._release()
                raise StorageConnectionError(self.endpoint, e) from e

    async def _release(self) -> None:
        """Close the client and credential and forget the containers."""
        self._initialized = False
        self._database = None
        self._containers = {}

        client, self._client = self._client, None
        if client is not None:
            await client.close()

        # AAD credentials hold their own HTTP session; a key string does not
        credential, self._credential = self._credential, None
        if credential is not None and hasattr(credential, "close"):
            await credential.close()

    def _wrap_error(
        self, operation: str, entity: str, entity_id: str | None, error: Exception
    ) -> StorefrontStorageError:
        if isinstance(error, CosmosHttpResponseError) and error.status_code in _AUTH_STATUS_CODES:
            return AuthenticationError(self.endpoint, str(error.message))
        return RemoteStoreError(operation, entity, entity_id, error)

    async def _fetch_all(self, entity: str, query: str) -> list[dict[str, Any]]:
        await self._ensure_initialized()
        container = self._containers[entity]

        rows: list[dict[str, Any]] = []
        try:
            async for row in container.query_items(query=query):
                rows.append(row)
        except CosmosHttpResponseError as e:
            raise self._wrap_error("fetch", entity, None, e) from e

        self._loggers[entity].debug(
            f"Fetched {len(rows)} {entity} rows", extra={"operation": "fetch"}
        )
        return rows

    async def _upsert(self, entity: str, row: dict[str, Any]) -> None:
        await self._ensure_initialized()
        try:
            await self._containers[entity].upsert_item(row)
        except CosmosHttpResponseError as e:
            raise self._wrap_error("upsert", entity, row["id"], e) from e
        self._loggers[entity].bind(entity_id=row["id"], operation="upsert").debug(
            f"Upserted {entity} {row['id']}"
        )

    async def _delete(self, entity: str, entity_id: str) -> None:
        await self._ensure_initialized()
        try:
            await self._containers[entity].delete_item(item=entity_id, partition_key=entity_id)
        except CosmosResourceNotFoundError:
            self._loggers[entity].bind(entity_id=entity_id, operation="delete").debug(
                f"{entity} {entity_id} already deleted"
            )
            return
        except CosmosHttpResponseError as e:
            raise self._wrap_error("delete", entity, entity_id, e) from e
        self._loggers[entity].bind(entity_id=entity_id, operation="delete").debug(
            f"Deleted {entity} {entity_id}"
        )

    async def fetch_products(self) -> list[Product]:
        rows = await self._fetch_all(PRODUCTS, "SELECT * FROM c")
        return [row_to_product(row) for row in rows]

    async def fetch_categories(self) -> list[CategoryItem]:
        rows = await self._fetch_all(CATEGORIES, "SELECT * FROM c ORDER BY c.name")
        return [row_to_category(row) for row in rows]

    async def fetch_banners(self) -> list[Banner]:
        rows = await self._fetch_all(BANNERS, "SELECT * FROM c")
        return [row_to_banner(row) for row in rows]

    async def upsert_product(self, product: Product) -> None:
        await self._upsert(PRODUCTS, product_to_row(product))

    async def upsert_category(self, category: CategoryItem) -> None:
        await self._upsert(CATEGORIES, category_to_row(category))

    async def upsert_banner(self, banner: Banner) -> None:
        await self._upsert(BANNERS, banner_to_row(banner))

    async def delete_product(self, product_id: str) -> None:
        await self._delete(PRODUCTS, product_id)

    async def delete_category(self, category_id: str) -> None:
        await self._delete(CATEGORIES, category_id)

    async def delete_banner(self, banner_id: str) -> None:
        await self._delete(BANNERS, banner_id)

    async def close(self) -> None:
        """Close the Cosmos client."""
        async with self._init_lock:
            await self._release()


class UnconfiguredRemoteStore(RemoteStore):
    """Remote store used when no endpoint is configured.

    Every call raises StorageConnectionError, which sends the
    reconciler down its local-cache path.
    """

    ENDPOINT = "<unconfigured>"

    def __init__(self) -> None:
        logger.warning("Remote store endpoint missing; running from the local cache only")

    def _unavailable(self) -> StorageConnectionError:
        return StorageConnectionError(
            self.ENDPOINT, RuntimeError("remote store not configured")
        )

    async def fetch_products(self) -> list[Product]:
        raise self._unavailable()

    async def fetch_categories(self) -> list[CategoryItem]:
        raise self._unavailable()

    async def fetch_banners(self) -> list[Banner]:
        raise self._unavailable()

    async def upsert_product(self, product: Product) -> None:
        raise self._unavailable()

    async def upsert_category(self, category: CategoryItem) -> None:
        raise self._unavailable()

    async def upsert_banner(self, banner: Banner) -> None:
        raise self._unavailable()

    async def delete_product(self, product_id: str) -> None:
        raise self._unavailable()

    async def delete_category(self, category_id: str) -> None:
        raise self._unavailable()

    async def delete_banner(self, banner_id: str) -> None:
        raise self._unavailable()

    async def close(self) -> None:
        pass


def create_remote_store(config: StorageConfig) -> RemoteStore:
    """Build the remote store described by the configuration."""
    if config.remote_configured:
        return CosmosRemoteStore(config)
    return UnconfiguredRemoteStore()

