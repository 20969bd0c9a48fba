from abc import ABC, abstractmethod
from typing import BinaryIO


class BaseBlobStore(ABC):
    """Contract for binary object storage keyed by opaque string."""

    @abstractmethod
    def put(self, key: str, data: bytes, content_type: str) -> None:
        """Store bytes under key, replacing any existing object.

        Raises:
            BlobStoreError: if the object cannot be written.
        """

    @abstractmethod
    def get(self, key: str) -> BinaryIO:
        """Open the object stored under key as a readable byte stream.

        The caller closes the stream.

        Raises:
            BlobNotFoundError: if no object exists under key.
            BlobStoreError: on any other storage failure.
        """
