"""Media uploads to object storage."""

import logging
import time
from dataclasses import dataclass
from pathlib import PurePath
from uuid import uuid4

from ..clients.base import ObjectStorage
from ..config import DEFAULT_BUCKET

logger = logging.getLogger(__name__)


@dataclass
class MediaFile:
    """A file chosen in a form's file picker."""

    filename: str
    content: bytes
    content_type: str | None = None


def make_storage_key(
    filename: str, timestamp_ms: int | None = None, token: str | None = None
) -> str:
    """Build a collision-resistant storage key for an uploaded file.

    The key is ``<epoch millis>-<random token>`` plus the original file's
    extension, so no coordination with other uploaders is needed.
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    if token is None:
        token = uuid4().hex[:12]
    suffix = PurePath(filename).suffix
    return f"{timestamp_ms}-{token}{suffix}"


class MediaUploader:
    """Uploads files and resolves them to public URLs."""

    def __init__(self, storage: ObjectStorage, default_bucket: str = DEFAULT_BUCKET):
        self.storage = storage
        self.default_bucket = default_bucket or DEFAULT_BUCKET

    async def upload(self, media: MediaFile, bucket: str | None = None) -> str:
        """Upload a file and return its public URL.

        Storage errors propagate unchanged to the calling form.
        """
        bucket = bucket or self.default_bucket
        key = make_storage_key(media.filename)
        path = await self.storage.upload(
            bucket,
            key,
            media.content,
            content_type=media.content_type,
            upsert=True,
        )
        url = self.storage.get_public_url(bucket, path or key)
        logger.info(f"Uploaded {media.filename} as {bucket}/{key}")
        return url


async def resolve_media_url(
    uploader: MediaUploader, media: MediaFile | None, text: str | None
) -> str | None:
    """Pick the URL to store for a form offering both a URL field and a file picker.

    A selected file wins, then the trimmed text, then nothing.
    """
    if media is not None:
        return await uploader.upload(media)
    if text and text.strip():
        return text.strip()
    return None
