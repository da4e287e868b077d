"""
Local-disk file storage for rider submissions (GPX tracks, card photos).

Paths are relative keys like "{event_id}/{rider_id}/gpx-...gpx".
"""

import asyncio
import logging
from pathlib import Path
from typing import Iterable, Optional

from randonneurs.config import settings

logger = logging.getLogger(__name__)


class FileStorage:
    """Stores files under a root directory and serves them from a URL prefix."""

    def __init__(self, root: Optional[Path] = None, public_url: Optional[str] = None):
        self.root = Path(root or settings.storage_dir)
        self.public_url = (public_url or settings.storage_public_url).rstrip("/")

    def _resolve(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root.resolve() not in path.parents:
            raise ValueError(f"Storage key escapes root: {key}")
        return path

    async def upload(self, key: str, content: bytes) -> None:
        """Write a new file; an existing key is an error."""
        path = self._resolve(key)

        def _write():
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "xb") as f:
                f.write(content)

        await asyncio.to_thread(_write)

    async def remove(self, keys: Iterable[str]) -> None:
        """Delete files; missing files are ignored."""
        paths = [self._resolve(k) for k in keys]

        def _delete():
            for p in paths:
                p.unlink(missing_ok=True)

        await asyncio.to_thread(_delete)

    def exists(self, key: str) -> bool:
        return self._resolve(key).exists()

    def get_public_url(self, key: str) -> str:
        return f"{self.public_url}/{key}"


_storage: Optional[FileStorage] = None


def get_file_storage() -> FileStorage:
    """Get or create global FileStorage instance."""
    global _storage
    if _storage is None:
        _storage = FileStorage()
    return _storage
