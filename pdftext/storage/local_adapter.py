from pathlib import Path
from typing import BinaryIO

from pdftext.storage.base import BaseBlobStore
from pdftext.storage.exceptions import BlobNotFoundError, BlobStoreError


class LocalBlobStore(BaseBlobStore):
    """Stores blobs as files under a root directory: {root}/{key}"""

    def __init__(self, root: Path) -> None:
        self._root = root.resolve()

    def put(self, key: str, data: bytes, content_type: str) -> None:
        path = self._resolve_path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise BlobStoreError(f"Cannot write blob '{key}': {exc}") from exc

    def get(self, key: str) -> BinaryIO:
        path = self._resolve_path(key)
        if not path.is_file():
            raise BlobNotFoundError(f"Blob not found: {key}")
        try:
            return path.open("rb")
        except OSError as exc:
            raise BlobStoreError(f"Cannot read blob '{key}': {exc}") from exc

    def _resolve_path(self, key: str) -> Path:
        path = (self._root / key).resolve()
        if not path.is_relative_to(self._root):
            raise BlobStoreError(f"Key '{key}' escapes the storage root")
        return path
