"""
Application services for the tool lending module.
"""

from .account_service import AccountService
from .tool_upload_service import ToolUploadService

__all__ = [
    "AccountService",
    "ToolUploadService",
]
