#!/usr/bin/env python3
"""
Storage Service

Uploads, lists, downloads and deletes files in the configured storage bucket.
"""

import logging
import time
from typing import List, Dict, Optional

from core.exceptions import ValidationError
from core.security import SecurityValidator

logger = logging.getLogger(__name__)

DEFAULT_FOLDER = "images"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


class StorageService:
    """Service for file operations against one bucket."""

    def __init__(self, database, bucket: str = "articles", validator: Optional[SecurityValidator] = None):
        self.database = database
        self.bucket = bucket
        self.validator = validator or SecurityValidator()

    def _check_path(self, path: str, field: str = 'path') -> str:
        path = (path or "").strip()
        if not self.validator.validate_storage_path(path):
            raise ValidationError(field, 'must be a relative path inside the bucket')
        return path.strip('/')

    def upload(self,
               filename: str,
               data: bytes,
               content_type: Optional[str] = None,
               folder: str = DEFAULT_FOLDER) -> Dict[str, str]:
        """
        Store a file under ``<folder>/<ms timestamp>_<safe name>``.

        Returns:
            Dict with the stored path and its public url
        """
        if not data:
            raise ValidationError('file', 'must not be empty')

        folder = self._check_path(folder or DEFAULT_FOLDER, 'folder')
        name = f"{int(time.time() * 1000)}_{self.validator.sanitize_filename(filename)}"
        path = f"{folder}/{name}" if folder else name

        url = self.database.upload_file(self.bucket, path, data, content_type or DEFAULT_CONTENT_TYPE)
        logger.info(f"Uploaded {len(data)} bytes to {self.bucket}/{path}")
        return {'path': path, 'url': url}

    def list(self, folder: str = "") -> List[str]:
        return self.database.list_files(self.bucket, self._check_path(folder, 'folder'))

    def download(self, path: str) -> bytes:
        path = self._check_path(path)
        if not path:
            raise ValidationError('path', 'is required')
        return self.database.download_file(self.bucket, path)

    def delete(self, paths: List[str]) -> int:
        """Delete files, returning how many paths were submitted."""
        if not paths:
            raise ValidationError('paths', 'at least one path is required')

        checked = [self._check_path(path) for path in paths]
        if not all(checked):
            raise ValidationError('paths', 'empty path')

        self.database.delete_files(self.bucket, checked)
        logger.info(f"Deleted {len(checked)} files from {self.bucket}")
        return len(checked)
