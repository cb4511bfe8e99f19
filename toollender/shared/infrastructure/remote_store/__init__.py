# 📄 File: toollender/shared/infrastructure/remote_store/__init__.py
# 🧭 Purpose (Layman Explanation):
# Everything ToolLender needs to talk to the shared online database.
# 🧪 Purpose (Technical Summary):
# Remote document store port, query value objects and the in-memory adapter.
# The Supabase adapter is imported from its module so the supabase package is
# only loaded when that backend is selected.
# 🔗 Dependencies:
# base.py, memory_store.py
# 🔄 Connected Modules / Calls From:
# cache/read_through.py, repository implementations, container

from .base import (
    SERVER_TIMESTAMP,
    Document,
    FieldFilter,
    OrderBy,
    ReadMode,
    RemoteStoreClient,
    WriteMode,
    apply_query,
)
from .memory_store import InMemoryRemoteStoreClient

__all__ = [
    "SERVER_TIMESTAMP",
    "Document",
    "FieldFilter",
    "OrderBy",
    "ReadMode",
    "RemoteStoreClient",
    "WriteMode",
    "apply_query",
    "InMemoryRemoteStoreClient",
]
