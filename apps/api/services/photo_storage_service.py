import datetime as dt
import hashlib
import io
import logging
import os

import boto3
import sentry_sdk
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)

SPACES_ENDPOINT_URL = os.getenv("SPACES_ENDPOINT_URL", "https://nyc3.digitaloceanspaces.com")
SPACES_BUCKET = os.getenv("SPACES_BUCKET", "courtfinder-photos")
SPACES_ACCESS_KEY_ID = os.getenv("SPACES_ACCESS_KEY_ID")
SPACES_SECRET_ACCESS_KEY = os.getenv("SPACES_SECRET_ACCESS_KEY")
SPACES_PUBLIC_URL = os.getenv("SPACES_PUBLIC_URL", f"https://{SPACES_BUCKET}.nyc3.cdn.digitaloceanspaces.com")

MAX_UPLOAD_BYTES = 10 * 1024 * 1024

_content_type_ext = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/heic": "heic",
}

ALLOWED_CONTENT_TYPES = frozenset(_content_type_ext)


def _ext_from_content_type(ct: str) -> str:
    return _content_type_ext.get(ct.lower(), "bin")


def key_from_url(url: str) -> str | None:
    """Return the object key for a URL this service issued, or None for foreign URLs."""
    prefix = f"{SPACES_PUBLIC_URL.rstrip('/')}/"
    if not url.startswith(prefix):
        return None
    return url[len(prefix) :] or None


class PhotoStorageService:
    def __init__(self) -> None:
        """Create the S3 client for the configured Spaces (or MinIO) endpoint."""
        self.client = boto3.client(
            service_name="s3",
            endpoint_url=SPACES_ENDPOINT_URL,
            aws_access_key_id=SPACES_ACCESS_KEY_ID,
            aws_secret_access_key=SPACES_SECRET_ACCESS_KEY,
            region_name="us-east-1",
            config=Config(s3={"addressing_style": "path"}),
        )

    def upload_photo(self, image: bytes, content_type: str) -> str:
        """Upload a court photo and return its public URL.

        Args:
            image: Raw image bytes.
            content_type: MIME type of the image.
        """
        digest = hashlib.blake2b(image, digest_size=16).hexdigest()
        today = dt.datetime.now(dt.timezone.utc).strftime("%Y/%m/%d")
        key = f"court-photos/{today}/{digest}.{_ext_from_content_type(content_type)}"

        self.client.upload_fileobj(
            io.BytesIO(image),
            SPACES_BUCKET,
            key,
            ExtraArgs={
                "ContentType": content_type,
                "ACL": "public-read",
                "CacheControl": "public, max-age=31536000, immutable",
            },
        )
        return f"{SPACES_PUBLIC_URL}/{key}"

    def delete_photos(self, urls: list[str]) -> int:
        """Delete stored objects behind the given URLs, best effort.

        URLs that were not issued by this bucket are skipped. Storage failures are
        logged and reported but never raised.

        Returns:
            Number of objects deleted.
        """
        keys = [key for url in urls if (key := key_from_url(url))]
        if not keys:
            return 0
        try:
            response = self.client.delete_objects(
                Bucket=SPACES_BUCKET,
                Delete={"Objects": [{"Key": key} for key in keys], "Quiet": False},
            )
        except (BotoCoreError, ClientError) as e:
            logger.warning("Failed to delete %d photo object(s) from storage", len(keys), exc_info=e)
            sentry_sdk.capture_exception(e)
            return 0

        for error in response.get("Errors", []):
            logger.warning("Storage refused to delete %s: %s", error.get("Key"), error.get("Message"))
        return len(response.get("Deleted", []))


async def provide_photo_storage_service() -> PhotoStorageService:
    """Litestar DI provider for `PhotoStorageService`."""
    return PhotoStorageService()
