"""
Domain models for the tool lending module.
"""

from .association import ALL_ASSOCIATIONS, Association
from .tool import Tool, ToolDraft
from .user_profile import DEFAULT_USER_NAME, UserProfile

__all__ = [
    "ALL_ASSOCIATIONS",
    "Association",
    "DEFAULT_USER_NAME",
    "Tool",
    "ToolDraft",
    "UserProfile",
]
