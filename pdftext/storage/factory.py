from pathlib import Path

from pdftext.config.settings import Settings
from pdftext.storage.base import BaseBlobStore
from pdftext.storage.local_adapter import LocalBlobStore
from pdftext.storage.s3_adapter import S3BlobStore


class BlobStoreFactory:
    """Creates the configured blob store adapter."""

    BACKENDS = ("s3", "local")

    @classmethod
    def create(cls, settings: Settings) -> BaseBlobStore:
        backend = settings.storage_backend.lower()
        if backend == "s3":
            return S3BlobStore(
                bucket=settings.s3_bucket,
                access_key=settings.s3_access_key_id,
                secret_key=settings.s3_secret_access_key,
                region=settings.s3_region,
                endpoint=settings.s3_endpoint,
                force_path_style=settings.s3_force_path_style,
            )
        if backend == "local":
            return LocalBlobStore(Path(settings.storage_local_root))
        raise ValueError(
            f"Unknown storage backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
        )
