# 📄 File: toollender/shared/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Marks the 'shared' folder as the toolbox every part of ToolLender can use,
# like settings, error types, logging and the cache machinery.
#
# 🧪 Purpose (Technical Summary):
# Shared kernel package for configuration, exceptions, logging and the
# infrastructure adapters (remote store, local store, connectivity, storage).
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - toollender.modules.tool_lending (repositories and services)
# - toollender.container

"""
Shared Kernel - Common Utilities and Infrastructure

- Configuration management
- Exception hierarchy
- Structured logging
- Remote store port and adapters
- Local store, cache synchronizer and read-through policy
- Connectivity monitoring
- Blob storage
"""

__all__ = []
