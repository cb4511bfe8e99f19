"""
Domain services for the tool lending module.
"""

from .identity_provider import AuthSubject, IdentityProvider
from .tool_catalog import SortOption, browse, filter_by_association, search, sort_tools

__all__ = [
    "AuthSubject",
    "IdentityProvider",
    "SortOption",
    "browse",
    "filter_by_association",
    "search",
    "sort_tools",
]
