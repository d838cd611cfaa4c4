import logging
import os
import uuid
from datetime import datetime

from fastapi import UploadFile

logger = logging.getLogger(__name__)


class StorageService:
    """
    Writes uploaded campaign images to the local upload directory.

    Stored references are relative paths such as ``uploads/20250101_120000_ab12cd34.png``,
    which the app serves under the same prefix. Files are never removed when an
    event is deleted, and no size or type check is applied here.
    """

    def __init__(self, upload_dir: str, url_prefix: str = "uploads"):
        self.upload_dir = upload_dir
        self.url_prefix = url_prefix.strip("/")
        os.makedirs(self.upload_dir, exist_ok=True)

    def _generate_filename(self, original_filename: str) -> str:
        """Generate unique filename"""
        ext = os.path.splitext(original_filename or "")[1].lower()
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        unique_id = str(uuid.uuid4())[:8]
        return f"{timestamp}_{unique_id}{ext}"

    async def save_upload(self, file: UploadFile) -> str:
        """
        Save an uploaded file synchronously to disk.

        Returns:
            Relative path of the stored file, used as the event's image reference
        """
        content = await file.read()
        filename = self._generate_filename(file.filename)
        path = os.path.join(self.upload_dir, filename)
        with open(path, "wb") as out:
            out.write(content)

        logger.info(f"Stored upload {file.filename!r} as {filename} ({len(content)} bytes)")
        return f"{self.url_prefix}/{filename}"
