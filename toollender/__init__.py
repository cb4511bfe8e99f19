# 📄 File: toollender/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Tells Python this folder holds the ToolLender data layer, the part of the app
# that remembers tools, users and associations so browsing stays fast offline.
#
# 🧪 Purpose (Technical Summary):
# Package initialization with version metadata for the ToolLender cache-backed
# repository layer.
#
# 🔗 Dependencies:
# - Python packaging system
#
# 🔄 Connected Modules / Calls From:
# - toollender.container (composition root)
# - pyproject.toml (version)

"""
ToolLender - Tool Lending Marketplace Data Layer

Read-through local/remote caching, background refresh and connectivity
handling for the tool, user and association data of the ToolLender app.
"""

__version__ = "1.0.0"
__title__ = "ToolLender Data Layer"
__description__ = "Cache-backed repositories for the ToolLender marketplace"
__author__ = "ToolLender Team"
__license__ = "MIT"

__all__ = [
    "__version__",
    "__title__",
    "__description__",
    "__author__",
    "__license__",
]
