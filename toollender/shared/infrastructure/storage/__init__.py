"""
Storage infrastructure for ToolLender.
Provides the blob storage port; the Supabase adapter lives in supabase_storage.
"""

from .base import BlobStorage

__all__ = [
    "BlobStorage",
]
