"""Blob store and metadata store gateways used by the orchestrator."""

from typing import Any, Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .database import Photo
from .error_handling import client_error_code, is_missing_object
from .exceptions import BlobNotFoundError, FetchError, PersistError, UploadError
from .logging_config import get_logger
from .protocols import S3ClientProtocol


class S3BlobStore:
    """Blob store backed by an S3 (or S3-compatible) bucket."""

    def __init__(self, s3_client: S3ClientProtocol):
        self._s3_client = s3_client
        self._logger = get_logger("gateways.s3")

    def download(self, bucket: str, path: str) -> bytes:
        """
        Download an object's bytes.

        Raises:
            BlobNotFoundError: If the bucket or key does not exist.
            FetchError: For any other failure to read the object.
        """
        self._logger.debug(f"Downloading s3://{bucket}/{path}")
        try:
            response = self._s3_client.get_object(Bucket=bucket, Key=path)
            data = response["Body"].read()
        except ClientError as exc:
            if is_missing_object(exc):
                raise BlobNotFoundError(f"Object {path} not found in bucket {bucket}") from exc
            raise FetchError(
                f"Failed to download s3://{bucket}/{path} ({client_error_code(exc)}): {exc}"
            ) from exc
        except (BotoCoreError, OSError, KeyError) as exc:
            raise FetchError(f"Failed to download s3://{bucket}/{path}: {exc}") from exc

        if not data:
            raise FetchError(f"Object s3://{bucket}/{path} is empty")
        return data

    def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str,
        upsert: bool = True,
    ) -> None:
        """
        Write an object. With ``upsert`` (the default) an existing object
        is overwritten; otherwise an existing object is an error.

        Raises:
            UploadError: If the write fails or the object exists without upsert.
        """
        if not upsert and self._exists(bucket, path):
            raise UploadError(f"Object s3://{bucket}/{path} already exists")

        self._logger.debug(f"Uploading {len(data)} bytes to s3://{bucket}/{path}")
        try:
            self._s3_client.put_object(
                Bucket=bucket, Key=path, Body=data, ContentType=content_type
            )
        except (ClientError, BotoCoreError) as exc:
            raise UploadError(f"Failed to upload s3://{bucket}/{path}: {exc}") from exc

    def _exists(self, bucket: str, path: str) -> bool:
        try:
            self._s3_client.head_object(Bucket=bucket, Key=path)
        except ClientError as exc:
            if is_missing_object(exc):
                return False
            raise UploadError(f"Failed to check s3://{bucket}/{path}: {exc}") from exc
        return True


class SqlMetadataStore:
    """Photo record updates through SQLAlchemy."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory
        self._logger = get_logger("gateways.sql")

    def update_photo(
        self,
        photo_id: str,
        variants: Optional[Dict[str, str]] = None,
        blurhash: Optional[str] = None,
    ) -> None:
        """
        Partially update a photo record.

        ``variants`` entries are merged into the stored map so concurrent
        runs touching different keys do not drop each other's entries.
        ``blurhash`` is only written when given.

        Raises:
            PersistError: If the record does not exist or the update fails.
        """
        try:
            with self._session_factory() as session, session.begin():
                photo = session.get(Photo, photo_id, with_for_update=True)
                if photo is None:
                    raise PersistError(f"Photo {photo_id} not found")

                if variants:
                    merged = dict(photo.variants or {})
                    merged.update(variants)
                    photo.variants = merged
                if blurhash is not None:
                    photo.blurhash = blurhash
        except SQLAlchemyError as exc:
            raise PersistError(f"Failed to update photo {photo_id}: {exc}") from exc

        self._logger.debug(
            f"Updated photo {photo_id}: variants={sorted(variants or {})}, "
            f"blurhash={'set' if blurhash else 'unchanged'}"
        )

    def get_photo(self, photo_id: str) -> Optional[Dict[str, Any]]:
        """Return the photo record as a dict, or None."""
        with self._session_factory() as session:
            photo = session.get(Photo, photo_id)
            if photo is None:
                return None
            return {
                "id": photo.id,
                "storage_path": photo.storage_path,
                "variants": photo.variants,
                "blurhash": photo.blurhash,
            }
