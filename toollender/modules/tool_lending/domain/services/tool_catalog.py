# 📄 File: toollender/modules/tool_lending/domain/services/tool_catalog.py
# 🧭 Purpose (Layman Explanation):
# Helps members browse tools: show only their association's tools, search by words,
# and sort alphabetically or by newest/oldest.
# 🧪 Purpose (Technical Summary):
# Pure in-memory filtering, search and ordering over Tool lists. Filters preserve
# input order; sorting is stable and treats a missing creation time as "now".
# 🔗 Dependencies:
# datetime, enum, typing, domain models
# 🔄 Connected Modules / Calls From:
# Application layer and UI adapters, tests

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Sequence

from ..models.association import ALL_ASSOCIATIONS
from ..models.tool import Tool


class SortOption(str, Enum):
    """Tool list orderings offered to the user."""
    ALPHABETICAL = "alphabetical"
    NEWEST = "newest"
    OLDEST = "oldest"


def filter_by_association(tools: Sequence[Tool], association: str) -> List[Tool]:
    """
    Keep tools listed under ``association``; "All" keeps every tool.

    Input order is preserved.
    """
    if association == ALL_ASSOCIATIONS:
        return list(tools)
    return [tool for tool in tools if tool.category == association]


def search(tools: Sequence[Tool], query: str) -> List[Tool]:
    """Case-insensitive substring match on name or description; blank matches all."""
    needle = (query or "").strip().casefold()
    if not needle:
        return list(tools)
    return [
        tool for tool in tools
        if needle in tool.name.casefold() or needle in tool.description.casefold()
    ]


def sort_tools(tools: Sequence[Tool], option: SortOption, now: Optional[datetime] = None) -> List[Tool]:
    """
    Order tools by name or creation time.

    Args:
        tools: Tools to order
        option: Requested ordering
        now: Time assumed for tools without a creation time

    Returns:
        A new, stably sorted list
    """
    option = SortOption(option)
    if option is SortOption.ALPHABETICAL:
        return sorted(tools, key=lambda tool: tool.name.casefold())

    now = now or datetime.now(timezone.utc)

    def created(tool: Tool) -> datetime:
        value = tool.created_at or now
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    return sorted(tools, key=created, reverse=option is SortOption.NEWEST)


def browse(
    tools: Sequence[Tool],
    association: str = ALL_ASSOCIATIONS,
    query: str = "",
    sort: SortOption = SortOption.NEWEST,
) -> List[Tool]:
    """Association filter, then search, then sort."""
    return sort_tools(search(filter_by_association(tools, association), query), sort)
