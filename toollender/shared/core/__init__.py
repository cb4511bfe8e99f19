# 📄 File: toollender/shared/core/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Holds the core building blocks every part of ToolLender relies on, starting
# with the list of error types.
#
# 🧪 Purpose (Technical Summary):
# Core package exporting the exception hierarchy.
#
# 🔗 Dependencies:
# - exceptions.py
#
# 🔄 Connected Modules / Calls From:
# - Repositories, adapters, services, tests

from .exceptions import (
    AlreadyExistsError,
    AuthenticationError,
    CacheError,
    ConfigurationError,
    DecodeError,
    NotFoundError,
    RemoteConflictError,
    RemoteStoreError,
    RemoteUnavailableError,
    StorageError,
    ToolLenderException,
    ValidationError,
)

__all__ = [
    "AlreadyExistsError",
    "AuthenticationError",
    "CacheError",
    "ConfigurationError",
    "DecodeError",
    "NotFoundError",
    "RemoteConflictError",
    "RemoteStoreError",
    "RemoteUnavailableError",
    "StorageError",
    "ToolLenderException",
    "ValidationError",
]
