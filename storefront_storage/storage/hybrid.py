"""
Hybrid catalog store with local cache + remote propagation.

Owns the storefront's AppState for the lifetime of a session and keeps
the local cache and the remote store in step with it.

Architecture:
- Startup loads from the remote store, falling back to the local cache,
  falling back to the built-in catalog
- Mutations replace the in-memory state immediately and write the cache
  before returning
- The matching remote write is scheduled on the running event loop and
  never awaited by the caller
- A failed remote write is logged and not retried; local state keeps
  the change until the next successful write or bulk push
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum

from ..catalog import transforms
from ..catalog.defaults import default_state, migrate_cached_state
from ..catalog.types import AppState, Banner, CategoryItem, Product
from ..exceptions import StorageIOError, SyncError
from ..id_utils import new_entity_id
from ..logging_utils import StorageLoggerAdapter
from .base import RemoteStore, StorageConfig
from .cosmos import create_remote_store
from .local import LocalCacheStore

logger = logging.getLogger(__name__)

StateListener = Callable[[AppState], None]


class LoadSource(Enum):
    """Where the state adopted at startup came from."""

    REMOTE = "remote"  # Remote store had products or categories
    LOCAL_CACHE = "local_cache"  # Cached blob from a previous session
    DEFAULTS = "defaults"  # Built-in catalog


class HybridCatalogStore:
    """Single owner of the storefront state.

    The presentation layer holds one instance, reads `state`, subscribes
    to changes and calls the mutation operations. Nothing else mutates
    the state.

    Consistency model:
    - Each mutation is one synchronous commit: new state, cache write,
      listener notification
    - Remote propagation is at-most-once per mutation with no retry, so
      local and remote may diverge after a failure
    - Favorites are local-only and never sent to the remote store
    """

    def __init__(self, remote: RemoteStore, local: LocalCacheStore) -> None:
        """Initialize the store with an empty state.

        Args:
            remote: Remote store receiving propagated mutations
            local: Local cache mirrored on every commit
        """
        self._remote = remote
        self._local = local
        self._state = AppState()
        self._loading = True
        self._listeners: list[StateListener] = []
        self._pending: set[asyncio.Task[None]] = set()

    @classmethod
    def from_config(cls, config: StorageConfig) -> HybridCatalogStore:
        """Build a store from configuration (see StorageConfig.from_environment)."""
        return cls(create_remote_store(config), LocalCacheStore.from_config(config))

    @property
    def state(self) -> AppState:
        """The current state snapshot."""
        return self._state

    @property
    def is_loading(self) -> bool:
        """True until load_data() has finished, whatever its outcome."""
        return self._loading

    @property
    def pending_count(self) -> int:
        """Number of remote propagations still in flight."""
        return len(self._pending)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener called with the new state after each commit.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Startup

    async def load_data(self) -> LoadSource:
        """Populate the state, preferring the remote store.

        The local state (cache blob, or built-in catalog) is computed first
        and serves as the fallback for categories, banners and favorites.
        Remote data is adopted when it has any products or categories.
        Remote failures are logged and never raised.

        Returns:
            Where the adopted state came from
        """
        try:
            previous, local_source = await self._load_local()

            try:
                products, categories, banners = await asyncio.gather(
                    self._remote.fetch_products(),
                    self._remote.fetch_categories(),
                    self._remote.fetch_banners(),
                )
            except Exception as e:
                logger.warning(
                    f"Remote load failed, using {local_source.value}: {e}",
                    extra={"operation": "load", "source": local_source.value, "error": e},
                )
                self._commit(previous)
                return local_source

            if products or categories:
                # Products has no per-field fallback; categories and banners do
                self._commit(
                    AppState(
                        products=products,
                        favorites=previous.favorites,
                        categories=categories or previous.categories,
                        banners=banners or previous.banners,
                    )
                )
                logger.info(
                    f"Loaded {len(products)} products, {len(categories)} categories "
                    f"and {len(banners)} banners from remote store",
                    extra={"operation": "load", "source": LoadSource.REMOTE.value},
                )
                return LoadSource.REMOTE

            logger.info(
                f"Remote store is empty, using {local_source.value}",
                extra={"operation": "load", "source": local_source.value},
            )
            self._commit(previous)
            return local_source
        finally:
            self._loading = False

    async def _load_local(self) -> tuple[AppState, LoadSource]:
        """Read the cache blob, migrating it, or build the default state."""
        try:
            blob = await self._local.load()
        except StorageIOError as e:
            logger.warning(f"Local cache unreadable, treating as empty: {e}")
            blob = None

        if blob is None:
            return default_state(), LoadSource.DEFAULTS

        try:
            return migrate_cached_state(blob), LoadSource.LOCAL_CACHE
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Local cache has malformed entries, treating as empty: {e}")
            return default_state(), LoadSource.DEFAULTS

    # Products

    def add_product(self, product: Product) -> None:
        """Prepend a product and upsert it remotely."""
        self._commit(transforms.add_product(self._state, product))
        self._propagate(
            "upsert", "product", product.id, lambda: self._remote.upsert_product(product)
        )

    def update_product(self, product: Product) -> None:
        """Replace a product by ID and upsert it remotely."""
        self._commit(transforms.update_product(self._state, product))
        self._propagate(
            "upsert", "product", product.id, lambda: self._remote.upsert_product(product)
        )

    def delete_product(self, product_id: str) -> None:
        """Remove a product by ID and delete it remotely."""
        self._commit(transforms.delete_product(self._state, product_id))
        self._propagate(
            "delete", "product", product_id, lambda: self._remote.delete_product(product_id)
        )

    def toggle_featured(self, product_id: str) -> Product:
        """Flip a product's featured flag.

        Raises:
            EntityNotFoundError: If the product does not exist
            FeaturedLimitError: If the featured limit is already reached

        Returns:
            The updated product
        """
        product = transforms.toggle_featured(self._state, product_id)
        self.update_product(product)
        return product

    def toggle_favorite(self, product_id: str) -> None:
        """Add or remove a favorite. Favorites stay on this device."""
        self._commit(transforms.toggle_favorite(self._state, product_id))

    # Categories

    def add_category(self, name: str) -> CategoryItem:
        """Append a new, empty category and upsert it remotely.

        Returns:
            The created category, with its generated ID
        """
        category = CategoryItem(id=new_entity_id(), name=name, subcategories=[])
        self._commit(transforms.add_category(self._state, category))
        self._propagate(
            "upsert", "category", category.id, lambda: self._remote.upsert_category(category)
        )
        return category

    def update_category(self, category: CategoryItem) -> None:
        """Replace a category by ID (rename, edit subcategories) and upsert it remotely."""
        self._commit(transforms.update_category(self._state, category))
        self._propagate(
            "upsert", "category", category.id, lambda: self._remote.upsert_category(category)
        )

    def add_subcategory(self, category_id: str, subcategory: str) -> None:
        """Append a subcategory name and upsert the changed category remotely.

        An unknown category ID changes nothing and sends nothing.
        """
        self._commit(transforms.add_subcategory(self._state, category_id, subcategory))

        category = transforms.find_category(self._state, category_id)
        if category is None:
            logger.debug(f"Subcategory '{subcategory}' not added: no category {category_id}")
            return
        self._propagate(
            "upsert", "category", category.id, lambda: self._remote.upsert_category(category)
        )

    def delete_category(self, category_id: str) -> None:
        """Remove a category by ID and delete it remotely."""
        self._commit(transforms.delete_category(self._state, category_id))
        self._propagate(
            "delete", "category", category_id, lambda: self._remote.delete_category(category_id)
        )

    # Banners

    def add_banner(self, banner: Banner) -> None:
        """Append a banner and upsert it remotely."""
        self._commit(transforms.add_banner(self._state, banner))
        self._propagate("upsert", "banner", banner.id, lambda: self._remote.upsert_banner(banner))

    def remove_banner(self, banner_id: str) -> None:
        """Remove a banner by ID and delete it remotely."""
        self._commit(transforms.remove_banner(self._state, banner_id))
        self._propagate(
            "delete", "banner", banner_id, lambda: self._remote.delete_banner(banner_id)
        )

    # Bulk sync

    async def push_all(self, confirm: Callable[[], bool] | None = None) -> bool:
        """Upsert every product, category and banner to the remote store.

        All upserts run concurrently. The first failure is raised once as
        SyncError; upserts already in flight are not cancelled or rolled
        back, so the remote store may end up partially updated.

        Args:
            confirm: Asked before anything is sent; a false answer cancels

        Returns:
            True when everything was pushed, False when not confirmed

        Raises:
            SyncError: If any upsert failed
        """
        if confirm is not None and not confirm():
            return False

        snapshot = self._state
        writes: list[Awaitable[None]] = [
            *(self._remote.upsert_product(p) for p in snapshot.products),
            *(self._remote.upsert_category(c) for c in snapshot.categories),
            *(self._remote.upsert_banner(b) for b in snapshot.banners),
        ]
        try:
            await asyncio.gather(*writes)
        except Exception as e:
            logger.error(
                f"Push to remote store failed: {e}", extra={"operation": "push_all", "error": e}
            )
            raise SyncError("Failed to sync catalog with the remote store", cause=e) from e

        logger.info(
            f"Pushed {len(snapshot.products)} products, {len(snapshot.categories)} "
            f"categories and {len(snapshot.banners)} banners to remote store"
        )
        return True

    # Lifecycle

    async def wait_for_pending(self) -> None:
        """Wait for every scheduled remote propagation to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def close(self) -> None:
        """Let pending propagations finish, then close the remote store."""
        await self.wait_for_pending()
        await self._remote.close()

    # Private

    def _commit(self, new_state: AppState) -> None:
        """Adopt a new state, mirror it to the cache and notify listeners."""
        self._state = new_state

        try:
            self._local.save(new_state)
        except StorageIOError as e:
            logger.error(f"Failed to write local cache: {e}", extra={"error": e})

        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception as e:
                logger.error(f"State listener raised: {e}")

    def _propagate(
        self,
        operation: str,
        entity: str,
        entity_id: str,
        call: Callable[[], Awaitable[None]],
    ) -> None:
        """Schedule a remote write without waiting for it."""
        log = StorageLoggerAdapter(
            logger, {"operation": operation, "entity": entity, "entity_id": entity_id}
        )
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            log.warning(f"No running event loop, remote {operation} {entity} {entity_id} skipped")
            return

        task = loop.create_task(self._run_remote(log, call))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _run_remote(
        self, log: StorageLoggerAdapter, call: Callable[[], Awaitable[None]]
    ) -> None:
        ctx = log.extra
        description = f"{ctx['operation']} {ctx['entity']} {ctx['entity_id']}"
        try:
            await call()
        except Exception as e:
            log.error(
                f"Remote {description} failed, local state kept: {e}",
                extra={"error": e},
            )
        else:
            log.debug(f"Remote {description} done")
