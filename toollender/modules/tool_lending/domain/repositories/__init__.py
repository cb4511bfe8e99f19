"""
Repository interfaces for the tool lending module.
"""

from .association_repository import AssociationRepository
from .tool_repository import ToolRepository
from .user_repository import UserRepository

__all__ = [
    "AssociationRepository",
    "ToolRepository",
    "UserRepository",
]
