# 📄 File: toollender/shared/infrastructure/storage/base.py
# 🧭 Purpose (Layman Explanation):
# Describes what any picture storage must be able to do for ToolLender:
# keep an uploaded tool photo and hand back a link to it.
# 🧪 Purpose (Technical Summary):
# Blob storage port used by the tool upload service.
# 🔗 Dependencies:
# abc
# 🔄 Connected Modules / Calls From:
# supabase_storage.py, application/services/tool_upload_service.py, tests

from abc import ABC, abstractmethod


class BlobStorage(ABC):
    """Port for binary object storage."""

    @abstractmethod
    async def upload(self, path: str, data: bytes, content_type: str = "image/jpeg") -> str:
        """
        Store ``data`` at ``path``.

        Args:
            path: Object path within the bucket
            data: Raw bytes
            content_type: MIME type

        Returns:
            Publicly readable URL of the stored object

        Raises:
            StorageError: If the upload fails
        """
        pass

    @abstractmethod
    async def delete(self, path: str) -> None:
        """Delete the object at ``path``; absent objects are ignored."""
        pass
