# 📄 File: toollender/shared/infrastructure/cache/__init__.py
# 🧭 Purpose (Layman Explanation):
# The offline copy of ToolLender's data and the helpers that keep it fresh.
# 🧪 Purpose (Technical Summary):
# Local Store backends, the single-flight cache synchronizer and the generic
# read-through repository base.
# 🔗 Dependencies:
# local_store.py, synchronizer.py, read_through.py
# 🔄 Connected Modules / Calls From:
# repository implementations, container

from .local_store import CacheEntry, FileLocalStore, LocalStore
from .read_through import ReadThroughRepository
from .synchronizer import CacheSynchronizer

__all__ = [
    "CacheEntry",
    "CacheSynchronizer",
    "FileLocalStore",
    "LocalStore",
    "ReadThroughRepository",
]
