# pcforge/services/storage.py

import logging
from pathlib import Path
from typing import Optional

from ..config import settings

logger = logging.getLogger(__name__)


class FileStorage:
    """
    Local directory published under a public base URL.

    Keys are relative paths such as ``invoices/invoice_12.pdf``.
    """

    def __init__(self, root: str, public_base_url: str):
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root.resolve() not in path.parents:
            raise ValueError(f"Invalid storage key: {key}")
        return path

    def save(self, key: str, data: bytes) -> str:
        """Write (or overwrite) ``key`` and return its public URL."""
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.info("Stored %s (%d bytes)", key, len(data))
        return self.public_url(key)

    def read(self, key: str) -> bytes:
        return self._path(key).read_bytes()

    def exists(self, key: str) -> bool:
        return self._path(key).exists()

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"


_storage: Optional[FileStorage] = None


def get_storage() -> FileStorage:
    global _storage
    if _storage is None:
        _storage = FileStorage(settings.storage_dir, settings.public_base_url)
    return _storage


def set_storage(storage: Optional[FileStorage]) -> None:
    global _storage
    _storage = storage
