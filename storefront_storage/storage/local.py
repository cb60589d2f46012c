"""
Local cache store.

Keeps the whole AppState as one JSON blob in a file named after the
fixed cache key. The blob is read once at startup and overwritten on
every state change, with no versioning or partial updates.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os

from ..catalog.types import AppState
from ..exceptions import StorageIOError
from .base import StorageConfig

logger = logging.getLogger(__name__)


class LocalCacheStore:
    """File-backed cache of the storefront state.

    Writes are synchronous so that every committed state is on disk
    before the mutating call returns. Each write goes to a temp file in
    the same directory and is renamed over the blob, so a crash never
    leaves a half-written cache behind.
    """

    def __init__(self, path: Path | str) -> None:
        """Initialize the cache store.

        Args:
            path: Location of the cache blob
        """
        self.path = Path(path)

    @classmethod
    def from_config(cls, config: StorageConfig) -> LocalCacheStore:
        return cls(config.resolved_cache_path())

    def save(self, state: AppState) -> None:
        """Serialize the state and replace the cached blob.

        Raises:
            StorageIOError: If the blob cannot be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            content = json.dumps(state.to_dict(), ensure_ascii=False)
        except (OSError, TypeError, ValueError) as e:
            raise StorageIOError("write_cache", str(self.path), e) from e

        try:
            fd, temp_path = tempfile.mkstemp(
                dir=self.path.parent,
                prefix=".tmp_",
                suffix=".json",
            )
        except OSError as e:
            raise StorageIOError("write_cache", str(self.path), e) from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())

            # Atomic rename
            os.replace(temp_path, self.path)
        except OSError as e:
            try:
                os.remove(temp_path)
            except OSError:
                pass
            raise StorageIOError("write_cache", str(self.path), e) from e

    async def load(self) -> dict[str, Any] | None:
        """Read the cached blob.

        Returns:
            The parsed blob, or None if nothing has been cached yet

        Raises:
            StorageIOError: If the blob exists but cannot be read or parsed
        """
        try:
            if not await aiofiles.os.path.exists(self.path):
                return None
            async with aiofiles.open(self.path, encoding="utf-8") as f:
                content = await f.read()
        except OSError as e:
            raise StorageIOError("read_cache", str(self.path), e) from e

        if not content.strip():
            return None

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise StorageIOError("parse_cache", str(self.path), e) from e

        if not isinstance(data, dict):
            raise StorageIOError(
                "parse_cache", str(self.path), ValueError("cache blob is not an object")
            )
        return data

    def clear(self) -> None:
        """Remove the cached blob if present."""
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageIOError("clear_cache", str(self.path), e) from e
        logger.debug(f"Cleared local cache at {self.path}")
