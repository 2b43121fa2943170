"""
Signed URLs for vision board images.

Objects live under "{user_id}/" in the storage bucket. Uploads get a fresh
unique name in the caller's folder; downloads are only signed for paths in
that folder.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any

from supabase import Client

from northstar.config import settings
from northstar.errors import NorthstarError

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})
DEFAULT_EXTENSION = "jpg"


class StorageSigningError(NorthstarError):
    """Base class for signing failures."""


class UnsupportedContentTypeError(StorageSigningError):
    """Upload content type is not an allowed image type."""


class ForbiddenPathError(StorageSigningError):
    """Requested object is outside the caller's folder."""


class StorageProviderError(StorageSigningError):
    """The storage service failed to sign the URL."""


@dataclass(frozen=True)
class SignedUpload:
    signed_url: str
    path: str
    token: str | None = None


def build_upload_path(user_id: str, filename: str) -> str:
    """Unique object path in the user's folder, keeping the file extension."""
    _, dot, ext = filename.rpartition(".")
    if not dot or not ext:
        ext = DEFAULT_EXTENSION
    return f"{user_id}/{uuid.uuid4()}.{ext}"


def is_owned_path(user_id: str, path: str) -> bool:
    """True only for a plain relative path inside the user's folder."""
    if not user_id or not path or path.startswith("/") or "\\" in path:
        return False
    # Storage resolves dot segments, so "user-1/../user-2/x" would escape the folder
    if any(part in ("", ".", "..") for part in path.split("/")):
        return False
    return path.startswith(f"{user_id}/")


def _signed_url_from(data: Any) -> str | None:
    """storage3 has used signedUrl, signedURL and signed_url across releases."""
    if not isinstance(data, dict):
        return None
    return data.get("signedUrl") or data.get("signedURL") or data.get("signed_url")


class StorageSigner:
    """Creates signed upload/download URLs scoped to one user's folder."""

    def __init__(self, client: Client, bucket: str | None = None, ttl_seconds: int | None = None):
        self._client = client
        self._bucket = bucket or settings.storage_bucket
        self._ttl_seconds = ttl_seconds or settings.signed_url_ttl_seconds

    def _bucket_api(self):
        return self._client.storage.from_(self._bucket)

    def sign_upload(self, user_id: str, filename: str, content_type: str) -> SignedUpload:
        if content_type not in ALLOWED_CONTENT_TYPES:
            raise UnsupportedContentTypeError(content_type)

        path = build_upload_path(user_id, filename)
        try:
            data = self._bucket_api().create_signed_upload_url(path)
        except Exception as e:
            logger.error(f"Storage error creating upload URL for {path}: {e}")
            raise StorageProviderError("Failed to create upload URL") from e

        signed_url = _signed_url_from(data)
        if not signed_url:
            logger.error(f"Storage returned no upload URL for {path}")
            raise StorageProviderError("Failed to create upload URL")

        return SignedUpload(signed_url=signed_url, path=path, token=data.get("token"))

    def sign_download(self, user_id: str, path: str) -> str:
        if not is_owned_path(user_id, path):
            logger.warning(f"User {user_id} requested a download URL for foreign path {path}")
            raise ForbiddenPathError(path)

        try:
            data = self._bucket_api().create_signed_url(path, self._ttl_seconds)
        except Exception as e:
            logger.error(f"Storage error creating download URL for {path}: {e}")
            raise StorageProviderError("Failed to create download URL") from e

        signed_url = _signed_url_from(data)
        if not signed_url:
            logger.error(f"Storage returned no download URL for {path}")
            raise StorageProviderError("Failed to create download URL")
        return signed_url
