"""
Image upload handling.

Accepts the single multipart file field ``image``, stores it in the upload
directory under a generated collision-resistant name, and hands the stored
path to the route handler.

Files are written before the handler validates the rest of the request, so
a rejected request can leave an orphaned file behind. Nothing cleans these up.
"""

import secrets
import shutil
import string
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from fastapi import File, Request, UploadFile
from loguru import logger
from starlette.concurrency import run_in_threadpool


TOKEN_ALPHABET = string.ascii_lowercase + string.digits
TOKEN_LENGTH = 13


@dataclass
class StoredFile:
    """A file persisted to the upload directory."""

    filename: str
    path: str
    original_name: str
    content_type: Optional[str]
    size: int


def generate_filename(original_name: str) -> str:
    """``{epoch_millis}-{random_token}{original_extension}``"""
    token = "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))
    return f"{int(time.time() * 1000)}-{token}{Path(original_name).suffix}"


class UploadStorage:
    """
    Local-disk storage for uploaded images.

    Usage:
        storage = UploadStorage("uploads")
        stored = await storage.save(upload_file)
        stored.path   # "uploads/1700000000000-k3j4h5g6f7d8s.png"
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _write(self, upload: UploadFile, target: Path) -> int:
        upload.file.seek(0)
        with target.open("wb") as out:
            shutil.copyfileobj(upload.file, out)
        return target.stat().st_size

    async def save(self, upload: UploadFile) -> StoredFile:
        """Write an uploaded file to disk under a generated name."""
        original_name = upload.filename or ""
        filename = generate_filename(original_name)
        target = self.directory / filename

        size = await run_in_threadpool(self._write, upload, target)
        logger.info(f"Stored upload '{original_name}' as {target} ({size} bytes)")

        return StoredFile(
            filename=filename,
            path=target.as_posix(),
            original_name=original_name,
            content_type=upload.content_type,
            size=size,
        )


async def store_image(
    request: Request,
    image: Optional[UploadFile] = File(None, description="Contact picture"),
) -> Optional[StoredFile]:
    """
    Dependency that persists the ``image`` field, if one was sent.

    Returns:
        The stored file, or None when the request carried no file.
    """
    if image is None or not image.filename:
        return None

    storage: UploadStorage = request.app.state.services.uploads
    return await storage.save(image)
