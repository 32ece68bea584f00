"""
Media Upload Service

Stores uploaded images under MEDIA_ROOT and builds their public URLs:

    {UPLOADS_BASE_URL}/media/images/{fieldname}-{milliseconds}{ext}

The files are served by the StaticFiles mount in main.py.
"""

import asyncio
import logging
import os
import time
import uuid
from pathlib import Path

from fastapi import UploadFile

from borohub.config import settings
from borohub.errors import BoroHubError
from borohub.utils.validators import is_allowed_image

logger = logging.getLogger(__name__)

MEDIA_URL_PATH = "/media/images"

# Upper bound per uploaded file
MAX_UPLOAD_BYTES = 10 * 1024 * 1024
READ_CHUNK_BYTES = 64 * 1024


def create_file_url(filename: str) -> str:
    return f"{settings.UPLOADS_BASE_URL}{MEDIA_URL_PATH}/{filename}"


def _unique_name(fieldname: str, original: str) -> str:
    _, ext = os.path.splitext(original)
    millis = int(time.time() * 1000)
    return f"{fieldname}-{millis}-{uuid.uuid4().hex[:8]}{ext.lower()}"


def _check_type(file: UploadFile):
    if not is_allowed_image(file.filename):
        raise BoroHubError(f"Unsupported file type: {file.filename}", 400)


async def _read_limited(file: UploadFile) -> bytes:
    """Read an upload in chunks, stopping as soon as it exceeds MAX_UPLOAD_BYTES."""
    chunks = []
    size = 0
    while True:
        chunk = await file.read(READ_CHUNK_BYTES)
        if not chunk:
            break
        size += len(chunk)
        if size > MAX_UPLOAD_BYTES:
            raise BoroHubError(f"File too large: {file.filename}", 400)
        chunks.append(chunk)
    return b"".join(chunks)


def _write_files(items: list[tuple[str, bytes]]):
    media_root = Path(settings.MEDIA_ROOT)
    media_root.mkdir(parents=True, exist_ok=True)
    for filename, data in items:
        (media_root / filename).write_bytes(data)


async def save_uploads(files: list[UploadFile], fieldname: str) -> list[str]:
    """
    Write uploaded images to disk, keeping their order.

    Every file is checked (type, then size) before anything is written, so
    a rejected upload leaves no files behind.

    Args:
        files: The uploaded files
        fieldname: Form field name, used as the file name prefix

    Returns:
        Public URLs of the stored files

    Raises:
        BoroHubError: 400 for a non-image or oversized file
    """
    for file in files:
        _check_type(file)

    items = []
    for file in files:
        data = await _read_limited(file)
        items.append((_unique_name(fieldname, file.filename), data))

    # Disk writes run in a worker thread to keep the event loop free
    await asyncio.to_thread(_write_files, items)

    for file, (filename, _) in zip(files, items):
        logger.info(f"Stored upload {file.filename} as {filename}")
    return [create_file_url(filename) for filename, _ in items]


async def save_upload(file: UploadFile, fieldname: str) -> str:
    """Store a single uploaded image and return its public URL."""
    urls = await save_uploads([file], fieldname)
    return urls[0]
