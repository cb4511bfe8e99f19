"""
Repository implementations for the tool lending module.
"""

from .association_repository_impl import AssociationRepositoryImpl
from .tool_repository_impl import ToolRepositoryImpl
from .user_repository_impl import UserRepositoryImpl

__all__ = [
    "AssociationRepositoryImpl",
    "ToolRepositoryImpl",
    "UserRepositoryImpl",
]
