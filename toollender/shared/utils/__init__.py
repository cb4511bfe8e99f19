# 📄 File: toollender/shared/utils/__init__.py
#
# 🧭 Purpose (Layman Explanation):
# Small helpers shared across ToolLender, mainly the logging setup.
#
# 🧪 Purpose (Technical Summary):
# Utility package exporting structured logging helpers.
#
# 🔗 Dependencies:
# - logging.py
#
# 🔄 Connected Modules / Calls From:
# - Repositories, synchronizer, adapters, container

from .logging import (
    StructuredLogger,
    get_logger,
    log_context,
    setup_logging,
)

__all__ = [
    "StructuredLogger",
    "get_logger",
    "log_context",
    "setup_logging",
]
