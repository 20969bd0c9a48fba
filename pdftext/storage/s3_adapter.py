from typing import BinaryIO, cast

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from pdftext.storage.base import BaseBlobStore
from pdftext.storage.exceptions import BlobNotFoundError, BlobStoreError

_MISSING_KEY_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


class S3BlobStore(BaseBlobStore):
    """Blob store backed by an S3-compatible bucket (AWS S3, MinIO)."""

    def __init__(
        self,
        *,
        bucket: str,
        access_key: str,
        secret_key: str,
        region: str = "us-east-1",
        endpoint: str | None = None,
        force_path_style: bool = True,
    ) -> None:
        self._bucket = bucket
        self._client = boto3.client(
            "s3",
            endpoint_url=endpoint,
            aws_access_key_id=access_key or None,
            aws_secret_access_key=secret_key or None,
            region_name=region,
            config=BotoConfig(
                signature_version="s3v4",
                s3={"addressing_style": "path" if force_path_style else "auto"},
            ),
        )

    def put(self, key: str, data: bytes, content_type: str) -> None:
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as exc:
            raise BlobStoreError(f"S3 put failed for key '{key}': {exc}") from exc

    def get(self, key: str) -> BinaryIO:
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=key)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "")
            if code in _MISSING_KEY_CODES:
                raise BlobNotFoundError(f"Blob not found: {key}") from exc
            raise BlobStoreError(f"S3 get failed for key '{key}': {exc}") from exc
        except BotoCoreError as exc:
            raise BlobStoreError(f"S3 get failed for key '{key}': {exc}") from exc
        return cast(BinaryIO, response["Body"])
