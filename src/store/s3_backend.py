"""S3 content store and root register.

This module encapsulates boto3 client creation and object IO for the
S3 backend. Blocking boto3 calls run in worker threads.
"""

from __future__ import annotations

import asyncio
from typing import Any

from core.config import AlbumsConfig
from core.constants import BLOBS_DIR_NAME, ROOT_REGISTER_FILE_NAME
from core.errors import AlbumsBlobNotFoundError, AlbumsDependencyError, AlbumsStoreError
from core.logging_config import get_logger
from core.s3_uri import S3Location
from store.content_store import new_token

_LOGGER = get_logger(__name__)
_MISSING_KEY_CODES = ("NoSuchKey", "404", "NotFound")


def create_s3_client(config: AlbumsConfig) -> Any:
    """Create boto3 S3 client for the S3 backend.

    Args:
        config: Runtime config with optional session settings.

    Returns:
        Boto3 S3 client.

    Raises:
        AlbumsDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise AlbumsDependencyError(
            "The S3 backend requires boto3, but it is not installed. "
            "Install boto3 to use ALBUMS_BACKEND=s3."
        ) from error
    session_kwargs: dict[str, str] = {}
    if config.s3_profile:
        session_kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        session_kwargs["region_name"] = config.s3_region
    session = boto3.session.Session(**session_kwargs)
    return session.client("s3")


class S3ContentStore:
    """Blob store writing one object per token under ``{prefix}/blobs``."""

    def __init__(self, s3_client: Any, location: S3Location) -> None:
        self._client = s3_client
        self._location = location

    async def put(self, content: bytes) -> str:
        """Upload content as a new object.

        Args:
            content: Blob bytes.

        Returns:
            New token.

        Raises:
            AlbumsStoreError: If upload fails.
        """
        token = new_token()
        object_key = self._location.key(BLOBS_DIR_NAME, token)
        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=self._location.bucket,
                Key=object_key,
                Body=content,
            )
        except Exception as error:
            raise AlbumsStoreError(
                f"Failed to upload blob to s3://{self._location.bucket}/{object_key}: {error}. "
                "Check AWS credentials and retry."
            ) from error
        _LOGGER.debug("blob_uploaded", token=token, size=len(content))
        return token

    async def get(self, token: str) -> bytes:
        """Download object content.

        Args:
            token: Token returned by ``put``.

        Returns:
            Stored bytes.

        Raises:
            AlbumsBlobNotFoundError: If no object exists for token.
            AlbumsStoreError: If the download fails.
        """
        object_key = self._location.key(BLOBS_DIR_NAME, token)
        try:
            return await asyncio.to_thread(
                _read_object, self._client, self._location.bucket, object_key
            )
        except Exception as error:
            if _is_missing_key(error):
                raise AlbumsBlobNotFoundError(f"Unknown content token '{token}'.") from error
            raise AlbumsStoreError(
                f"Failed to download s3://{self._location.bucket}/{object_key}: {error}."
            ) from error


class S3RootRegister:
    """Root register stored as a single ``{prefix}/root.txt`` object."""

    def __init__(self, s3_client: Any, location: S3Location) -> None:
        self._client = s3_client
        self._location = location
        self._key = location.key(ROOT_REGISTER_FILE_NAME)

    async def read(self) -> str:
        """Read the register object.

        Returns:
            Stored token, or empty string when the object does not exist.

        Raises:
            AlbumsStoreError: If the read fails for another reason.
        """
        try:
            payload = await asyncio.to_thread(
                _read_object, self._client, self._location.bucket, self._key
            )
        except Exception as error:
            if _is_missing_key(error):
                return ""
            raise AlbumsStoreError(
                f"Failed to read root register s3://{self._location.bucket}/{self._key}: {error}."
            ) from error
        return payload.decode("utf-8").strip()

    async def write(self, value: str) -> None:
        """Overwrite the register object.

        Args:
            value: New register content.

        Raises:
            AlbumsStoreError: If the upload fails.
        """
        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=self._location.bucket,
                Key=self._key,
                Body=value.encode("utf-8"),
            )
        except Exception as error:
            raise AlbumsStoreError(
                f"Failed to write root register s3://{self._location.bucket}/{self._key}: "
                f"{error}. Check AWS credentials and retry."
            ) from error


def _read_object(s3_client: Any, bucket: str, key: str) -> bytes:
    response = s3_client.get_object(Bucket=bucket, Key=key)
    return response["Body"].read()


def _is_missing_key(error: Exception) -> bool:
    """Return True when a boto3 error reports a missing object."""
    response = getattr(error, "response", None)
    if not isinstance(response, dict):
        return False
    code = str(response.get("Error", {}).get("Code", ""))
    return code in _MISSING_KEY_CODES
