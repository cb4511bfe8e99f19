# 📄 File: toollender/modules/tool_lending/application/services/tool_upload_service.py
# 🧭 Purpose (Layman Explanation):
# Puts a new tool up for lending: stores its photo online, then saves the listing
# with a link to that photo.
# 🧪 Purpose (Technical Summary):
# Application service validating a ToolDraft, uploading the optional image to blob
# storage under tools/{owner_id}/{uuid}.{ext}, and creating the tool with the
# public URL. An uploaded image is removed again if the tool cannot be created.
# 🔗 Dependencies:
# mimetypes, uuid, storage port, ToolRepository
# 🔄 Connected Modules / Calls From:
# toollender.container, UI adapters, tests

import mimetypes
from typing import Optional
from uuid import uuid4

from toollender.shared.core.exceptions import StorageError
from toollender.shared.infrastructure.storage.base import BlobStorage
from toollender.shared.utils.logging import get_logger
from toollender.modules.tool_lending.domain.models.tool import Tool, ToolDraft
from toollender.modules.tool_lending.domain.repositories.tool_repository import ToolRepository

logger = get_logger(__name__)


class ToolUploadService:
    """Application service for publishing tool listings."""

    def __init__(self, tools: ToolRepository, storage: BlobStorage):
        self.tools = tools
        self.storage = storage

    @staticmethod
    def image_path(owner_id: str, content_type: str) -> str:
        extension = (mimetypes.guess_extension(content_type) or ".jpg").lstrip(".")
        if extension == "jpe":
            extension = "jpg"
        return f"tools/{owner_id}/{uuid4().hex}.{extension}"

    async def upload_tool(
        self,
        draft: ToolDraft,
        image: Optional[bytes] = None,
        content_type: str = "image/jpeg",
    ) -> Tool:
        """
        Publish a tool, with an optional photo.

        Args:
            draft: Tool input
            image: Raw image bytes, if a photo was chosen
            content_type: MIME type of ``image``

        Returns:
            The stored tool

        Raises:
            ValidationError: If a required field is blank (nothing is uploaded)
            StorageError: If the photo upload fails (no tool is created)
        """
        draft = draft.validate_required()

        path = None
        if image:
            path = self.image_path(draft.owner_id, content_type)
            url = await self.storage.upload(path, image, content_type)
            draft = draft.model_copy(update={"image_url": url})

        try:
            tool = await self.tools.create(draft)
        except Exception:
            if path is not None:
                await self._discard_image(path)
            raise

        logger.info(f"Tool {tool.id} published", owner_id=tool.owner_id, has_image=path is not None)
        return tool

    async def _discard_image(self, path: str) -> None:
        try:
            await self.storage.delete(path)
        except StorageError as e:
            logger.warning(f"Could not remove orphaned image {path}: {e.message}")
