"""
FormDrop Backend: Upload Receiver
===================================

What:  Stores the files of a form submission and hands back public URLs.
Why:   Centralizes all attachment file system operations.
How:   Each file is written under a generated name into one flat directory;
       the URL is built from the caller's scheme/host plus the public prefix.
Who:   Called by SubmissionService as the first intake stage; the uploads
       route and the notifier resolve stored names through it too.
When:  Before validation, once per POST /addUser.

Naming:
    <field>-<epoch millis>-<original filename with spaces as underscores>
    e.g. images-1718000000000-my_cat.png

    Two files of one request get different names as long as their original
    filenames differ. Identical names uploaded within the same millisecond
    would overwrite each other; that case is accepted.

Limits:
    Only the file count is capped (settings.max_images). No size or type
    checks are made.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import List, Optional, Sequence
from urllib.parse import quote

import aiofiles

from app.config import settings
from app.exceptions import UploadError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IncomingFile:
    """One file part read from the multipart body."""
    filename: str
    content: bytes


class UploadService:
    """
    Flat, content-addressable-by-name attachment store.

    Directory Structure:
        uploads/
        ├── images-1718000000000-cat.png
        └── images-1718000000000-dog.jpg
    """

    def __init__(
        self,
        storage_root: Optional[str] = None,
        url_prefix: Optional[str] = None,
        field_name: Optional[str] = None,
        max_files: Optional[int] = None,
    ):
        """
        Args:
            storage_root: Override the upload directory (used in tests).
        """
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        self.url_prefix = "/" + (url_prefix or settings.uploads_url_prefix).strip("/")
        self.field_name = field_name or settings.upload_field_name
        self.max_files = max_files or settings.max_images

    def generate_name(self, original_filename: str, now_ms: Optional[int] = None) -> str:
        """
        Build the stored name for one upload.

        Only the last path component of the client filename is kept, so a
        name like "../../x.png" is stored as "x.png".
        """
        if now_ms is None:
            now_ms = int(time.time() * 1000)
        base = PurePath(original_filename.replace("\\", "/")).name
        return f"{self.field_name}-{now_ms}-{'_'.join(base.split(' '))}"

    def public_url(self, base_url: str, stored_name: str) -> str:
        """
        Absolute URL under which the stored file is served.

        The stored name is percent-encoded; "#", "?" and "%" are legal in
        client filenames.
        """
        return f"{base_url.rstrip('/')}{self.url_prefix}/{quote(stored_name, safe='')}"

    def resolve(self, stored_name: str) -> Path:
        """
        Map a stored name to its path inside storage_root.

        Raises:
            ValidationError if the name would escape the storage directory.
        """
        path = (self.storage_root / stored_name).resolve()
        if path.parent != self.storage_root:
            raise ValidationError(
                message="Invalid file path",
                context={"requested": stored_name},
            )
        return path

    async def store_file(self, file: IncomingFile) -> str:
        """
        Write one file to disk and return its stored name.

        Raises:
            UploadError if the directory cannot be created or the write fails.
        """
        stored_name = self.generate_name(file.filename)
        path = self.storage_root / stored_name

        try:
            # Created on first use; later calls are no-ops
            self.storage_root.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, "wb") as f:
                await f.write(file.content)
        except OSError as e:
            logger.error("Failed to store upload at %s: %s", path, str(e))
            raise UploadError(
                message="Failed to upload images",
                context={"path": str(path), "os_error": str(e)},
            )

        logger.info("File stored: %s (%d bytes)", stored_name, len(file.content))
        return stored_name

    async def store_uploads(self, files: Sequence[IncomingFile], base_url: str) -> List[str]:
        """
        Store every file of one request, in order, and return their URLs.

        Files are written one after another. When a write fails, the files
        already written stay on disk.

        Raises:
            ValidationError if more than max_files files were sent.
            UploadError if any write fails.
        """
        if len(files) > self.max_files:
            raise ValidationError(
                message=f"A maximum of {self.max_files} images can be uploaded",
                context={"received": len(files), "max": self.max_files},
            )

        urls = []
        for file in files:
            stored_name = await self.store_file(file)
            urls.append(self.public_url(base_url, stored_name))
        return urls


# Process-wide instance, handed out by get_upload_service()
upload_service = UploadService()


def get_upload_service() -> UploadService:
    """FastAPI dependency returning the process-wide upload store."""
    return upload_service
