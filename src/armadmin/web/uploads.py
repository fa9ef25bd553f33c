"""Conversion of multipart file parts into media files."""

from fastapi import UploadFile

from ..services.media import MediaFile


async def read_upload(upload: UploadFile | None) -> MediaFile | None:
    """Read a file part. Browsers send an empty, unnamed part when nothing was picked."""
    if upload is None or not upload.filename:
        return None
    content = await upload.read()
    return MediaFile(filename=upload.filename, content=content, content_type=upload.content_type)
