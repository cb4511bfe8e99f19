# 📄 File: toollender/shared/config/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Contains the settings that tell ToolLender which online database to talk to
# and where to keep its offline copy.
#
# 🧪 Purpose (Technical Summary):
# Configuration package initialization with exports for settings management.
#
# 🔗 Dependencies:
# - settings.py (application settings)
#
# 🔄 Connected Modules / Calls From:
# - toollender.container
# - Infrastructure adapters

"""
Configuration Management Package

Handles all application configuration including:
- Environment-based settings
- Supabase connection settings
- Local cache (file or Redis) settings
- Connectivity probe settings
"""

from .settings import get_settings, Settings

__all__ = [
    "get_settings",
    "Settings",
]
