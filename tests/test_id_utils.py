"""Tests for entity ID generation."""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor

from storefront_storage.id_utils import new_entity_id


class TestNewEntityId:
    """Tests for new_entity_id."""

    def test_is_millisecond_timestamp(self) -> None:
        before = time.time_ns() // 1_000_000

        entity_id = new_entity_id()

        assert entity_id.isdigit()
        assert int(entity_id) >= before

    def test_strictly_increasing(self) -> None:
        ids = [int(new_entity_id()) for _ in range(1000)]

        assert ids == sorted(ids)
        assert len(set(ids)) == len(ids)

    def test_unique_across_threads(self) -> None:
        with ThreadPoolExecutor(max_workers=8) as pool:
            ids = list(pool.map(lambda _: new_entity_id(), range(500)))

        assert len(set(ids)) == 500
