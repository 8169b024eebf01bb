"""
File storage for verification documents and resumes
"""
import os
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from fastapi import UploadFile
import structlog

from verifyhub.core.config import settings
from verifyhub.core.exceptions import FileValidationError, StorageError

logger = structlog.get_logger()

OFFER_LETTER_FOLDER = "employment-verifications/offer-letters"
RELIEVING_LETTER_FOLDER = "employment-verifications/relieving-letters"
RESUME_FOLDER = "resumes"


@dataclass
class UploadedFile:
    """Validated upload held in memory until it is stored"""

    filename: str
    content_type: str
    content: bytes


class FileStorage(ABC):
    """Interface of the object store; returns the public location of each file"""

    @abstractmethod
    def save(self, upload: UploadedFile, folder: str) -> str:
        ...

    @abstractmethod
    def delete(self, url: str) -> None:
        ...


class LocalFileStorage(FileStorage):
    """Stores files under UPLOAD_DIR and serves them from /uploads"""

    def __init__(self, root: str, base_url: str):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def save(self, upload: UploadedFile, folder: str) -> str:
        ext = Path(upload.filename or "").suffix.lower()
        relative = f"{folder}/{uuid.uuid4()}{ext}"
        target = self.root / relative
        try:
            os.makedirs(target.parent, exist_ok=True)
            with open(target, "wb") as f:
                f.write(upload.content)
        except OSError as e:
            logger.error("file_store_failed", folder=folder, error=str(e))
            raise StorageError(details={"folder": folder}) from e

        logger.info("file_stored", folder=folder, size=len(upload.content))
        return f"{self.base_url}/uploads/{relative}"

    def delete(self, url: str) -> None:
        prefix = f"{self.base_url}/uploads/"
        if not url.startswith(prefix):
            return
        target = self.root / url[len(prefix):]
        try:
            target.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            logger.error("file_delete_failed", url=url, error=str(e))
            return
        logger.info("file_deleted", url=url)


def _check_content_type(upload: UploadFile, allowed_content_types: Optional[Iterable[str]]) -> None:
    allowed = list(allowed_content_types or settings.ALLOWED_UPLOAD_CONTENT_TYPES)
    if upload.content_type not in allowed:
        raise FileValidationError(
            "Only PDF or Word documents are allowed",
            details={"filename": upload.filename, "content_type": upload.content_type},
        )


def _to_uploaded_file(upload: UploadFile, content: bytes, limit: int) -> UploadedFile:
    # content holds at most limit + 1 bytes, enough to tell an oversized file apart
    if len(content) > limit:
        raise FileValidationError(
            f"File size exceeds maximum allowed size of {limit // (1024 * 1024)}MB",
            details={"filename": upload.filename},
        )
    return UploadedFile(
        filename=upload.filename,
        content_type=upload.content_type,
        content=content,
    )


def read_upload(
    upload: Optional[UploadFile],
    allowed_content_types: Optional[Iterable[str]] = None,
    max_size_bytes: Optional[int] = None,
) -> Optional[UploadedFile]:
    """Read an incoming file, rejecting anything that is not a small PDF or Word document"""
    if upload is None or not upload.filename:
        return None

    _check_content_type(upload, allowed_content_types)
    limit = max_size_bytes or settings.max_upload_size_bytes
    return _to_uploaded_file(upload, upload.file.read(limit + 1), limit)


async def read_upload_async(
    upload: Optional[UploadFile],
    allowed_content_types: Optional[Iterable[str]] = None,
    max_size_bytes: Optional[int] = None,
) -> Optional[UploadedFile]:
    """read_upload for async callers; the spooled file is read in the threadpool"""
    if upload is None or not upload.filename:
        return None

    _check_content_type(upload, allowed_content_types)
    limit = max_size_bytes or settings.max_upload_size_bytes
    return _to_uploaded_file(upload, await upload.read(limit + 1), limit)


def get_storage() -> FileStorage:
    """Dependency returning the configured file storage"""
    return LocalFileStorage(settings.UPLOAD_DIR, settings.PUBLIC_BASE_URL)
