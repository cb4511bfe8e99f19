# 📄 File: toollender/shared/infrastructure/storage/supabase_storage.py

# 🧭 Purpose (Layman Explanation):
# Uploads tool photos to Supabase cloud storage and gives back the web address
# where everyone can see them.

# 🧪 Purpose (Technical Summary):
# BlobStorage adapter over a Supabase storage bucket. Blocking storage calls run
# in worker threads; failures are wrapped in StorageError.

# 🔗 Dependencies:
# - supabase: Storage client (via SupabaseManager)
# - asyncio: Thread offloading

# 🔄 Connected Modules / Calls From:
# Called by: tool_upload_service.py
# Connects to: Supabase cloud storage

import asyncio
from typing import Optional

from toollender.shared.config.supabase import SupabaseManager
from toollender.shared.core.exceptions import StorageError
from toollender.shared.utils.logging import get_logger
from .base import BlobStorage

logger = get_logger(__name__)


class SupabaseBlobStorage(BlobStorage):
    """
    Supabase Storage client for ToolLender tool images.
    """

    def __init__(self, manager: SupabaseManager, bucket_name: Optional[str] = None):
        self.manager = manager
        self.bucket_name = bucket_name or manager.settings.SUPABASE_STORAGE_BUCKET

    def _bucket(self):
        return self.manager.get_storage_client(self.bucket_name)

    async def upload(self, path: str, data: bytes, content_type: str = "image/jpeg") -> str:
        """
        Upload file to Supabase Storage.

        Args:
            path: Path within the bucket
            data: File binary data
            content_type: MIME type of the file

        Returns:
            str: Public URL of uploaded file

        Raises:
            StorageError: If the upload or URL lookup fails
        """
        def run():
            self._bucket().upload(
                path=path,
                file=data,
                file_options={
                    "content-type": content_type,
                    "cache-control": "3600",
                    "upsert": "false",
                },
            )
            return self._bucket().get_public_url(path)

        try:
            public_url = await asyncio.to_thread(run)
        except Exception as e:
            logger.error(f"Failed to upload file {path}: {e}")
            raise StorageError(
                f"Upload failed: {e}",
                operation="upload",
                storage_path=path,
            ) from e

        logger.info(f"File uploaded successfully: {path}", bytes=len(data))
        return public_url

    async def delete(self, path: str) -> None:
        """
        Delete file from Supabase storage.

        Raises:
            StorageError: If the delete request fails
        """
        try:
            await asyncio.to_thread(self._bucket().remove, [path])
        except Exception as e:
            logger.error(f"Failed to delete file {path}: {e}")
            raise StorageError(
                f"Delete failed: {e}",
                operation="delete",
                storage_path=path,
            ) from e

        logger.info(f"File deleted successfully: {path}")
