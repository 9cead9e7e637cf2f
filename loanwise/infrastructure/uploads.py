"""Utility bill file validation and storage"""

import os
import uuid
from pathlib import Path
from typing import Optional, Tuple

from fastapi import UploadFile

from loanwise.config import settings
from loanwise.domain.exceptions import InvalidUploadError

ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".pdf"}
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "application/pdf"}


class BillFileStore:
    """Saves uploaded bill files under a local directory"""

    def __init__(self, upload_dir: str | None = None, max_bytes: int | None = None):
        self.upload_dir = Path(upload_dir or settings.upload_dir)
        self.max_bytes = max_bytes or settings.max_upload_bytes

    def check_type(self, filename: str, content_type: Optional[str]) -> None:
        """Reject anything but a PDF, JPEG or PNG (extension and content type)"""
        extension = os.path.splitext(filename or "")[1].lower()
        if extension not in ALLOWED_EXTENSIONS or content_type not in ALLOWED_CONTENT_TYPES:
            raise InvalidUploadError("Only PDF and image files are allowed")

    def check_size(self, size: int) -> None:
        if size > self.max_bytes:
            raise InvalidUploadError(f"File exceeds the {self.max_bytes // (1024 * 1024)}MB limit")

    def save(self, upload: UploadFile) -> Tuple[str, str]:
        """
        Validate and persist an upload; returns (original_name, stored_path).

        Reads at most max_bytes + 1 bytes from the spooled file, so an
        oversized body is rejected without being loaded in full.

        Raises:
            InvalidUploadError: Wrong file type or larger than max_bytes
        """
        self.check_type(upload.filename, upload.content_type)
        content = upload.file.read(self.max_bytes + 1)
        self.check_size(len(content))

        self.upload_dir.mkdir(parents=True, exist_ok=True)
        stored_path = self.upload_dir / uuid.uuid4().hex
        stored_path.write_bytes(content)

        return upload.filename, str(stored_path)

    def discard(self, stored_path: Optional[str]) -> None:
        """Remove a stored file whose bill record was never committed"""
        if stored_path:
            Path(stored_path).unlink(missing_ok=True)
