"""Tests for the local cache store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from storefront_storage.catalog.types import AppState
from storefront_storage.exceptions import StorageIOError
from storefront_storage.storage import LocalCacheStore, StorageConfig

from .conftest import make_state


class TestLocalCacheStore:
    """Tests for LocalCacheStore."""

    async def test_save_then_load(self, local: LocalCacheStore) -> None:
        state = make_state()

        local.save(state)
        blob = await local.load()

        assert blob is not None
        assert AppState.from_dict(blob) == state

    async def test_missing_file_is_a_miss(self, local: LocalCacheStore) -> None:
        assert await local.load() is None

    async def test_blank_file_is_a_miss(self, local: LocalCacheStore, cache_path: Path) -> None:
        cache_path.write_text("  \n", encoding="utf-8")

        assert await local.load() is None

    async def test_corrupt_file_raises(self, local: LocalCacheStore, cache_path: Path) -> None:
        cache_path.write_text("{not json", encoding="utf-8")

        with pytest.raises(StorageIOError) as exc_info:
            await local.load()
        assert exc_info.value.operation == "parse_cache"

    async def test_non_object_blob_raises(self, local: LocalCacheStore, cache_path: Path) -> None:
        cache_path.write_text("[1, 2, 3]", encoding="utf-8")

        with pytest.raises(StorageIOError):
            await local.load()

    def test_save_keeps_accents_readable(self, local: LocalCacheStore, cache_path: Path) -> None:
        local.save(make_state())

        text = cache_path.read_text(encoding="utf-8")
        assert "Eletrônicos" in text
        assert json.loads(text)["favorites"] == ["p2"]

    def test_save_creates_parent_directory(self, tmp_path: Path) -> None:
        store = LocalCacheStore(tmp_path / "nested" / "dir" / "cache.json")

        store.save(AppState())

        assert store.path.exists()

    def test_save_overwrites_without_leftovers(
        self, local: LocalCacheStore, cache_path: Path
    ) -> None:
        local.save(make_state())
        local.save(AppState())

        assert json.loads(cache_path.read_text(encoding="utf-8"))["products"] == []
        assert [p.name for p in cache_path.parent.iterdir()] == [cache_path.name]

    def test_save_into_unwritable_location_raises(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("x", encoding="utf-8")
        store = LocalCacheStore(blocker / "cache.json")

        with pytest.raises(StorageIOError) as exc_info:
            store.save(AppState())
        assert exc_info.value.operation == "write_cache"

    async def test_clear(self, local: LocalCacheStore) -> None:
        local.save(make_state())

        local.clear()
        local.clear()

        assert await local.load() is None

    def test_from_config_uses_cache_path(self, tmp_path: Path) -> None:
        config = StorageConfig(cache_path=str(tmp_path / "state.json"))

        assert LocalCacheStore.from_config(config).path == tmp_path / "state.json"
