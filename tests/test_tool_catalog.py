"""
Tests for browsing tools: association filter, search and sort.
"""

from datetime import datetime, timedelta, timezone

from toollender.modules.tool_lending.domain.models.tool import Tool
from toollender.modules.tool_lending.domain.services.tool_catalog import (
    SortOption,
    browse,
    filter_by_association,
    search,
    sort_tools,
)

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def make_tool(tool_id, name, category="Building A", description="", age_days=None):
    return Tool(
        id=tool_id,
        name=name,
        description=description or f"{name} to borrow",
        owner_id="owner-1",
        category=category,
        created_at=None if age_days is None else NOW - timedelta(days=age_days),
    )


TOOLS = [
    make_tool("t1", "saw", age_days=3),
    make_tool("t2", "Drill", category="Building B", description="Cordless drill", age_days=1),
    make_tool("t3", "Axe", age_days=10),
    make_tool("t4", "Ladder", category="Building B", description="Aluminium, 3 m", age_days=5),
]


def ids(tools):
    return [t.id for t in tools]


def test_all_keeps_every_tool_in_order():
    assert ids(filter_by_association(TOOLS, "All")) == ["t1", "t2", "t3", "t4"]


def test_association_filter_preserves_order():
    assert ids(filter_by_association(TOOLS, "Building B")) == ["t2", "t4"]


def test_unknown_association_matches_nothing():
    assert filter_by_association(TOOLS, "Nowhere") == []


def test_search_is_case_insensitive_on_name_and_description():
    assert ids(search(TOOLS, "DRILL")) == ["t2"]
    assert ids(search(TOOLS, "aluminium")) == ["t4"]


def test_blank_search_matches_everything():
    assert ids(search(TOOLS, "  ")) == ["t1", "t2", "t3", "t4"]


def test_alphabetical_sort_ignores_case():
    assert ids(sort_tools(TOOLS, SortOption.ALPHABETICAL)) == ["t3", "t2", "t4", "t1"]


def test_newest_and_oldest_sort():
    assert ids(sort_tools(TOOLS, SortOption.NEWEST, now=NOW)) == ["t2", "t1", "t4", "t3"]
    assert ids(sort_tools(TOOLS, "oldest", now=NOW)) == ["t3", "t4", "t1", "t2"]


def test_missing_creation_time_sorts_as_now():
    fresh = make_tool("t5", "Hammer")

    assert ids(sort_tools(TOOLS + [fresh], SortOption.NEWEST, now=NOW))[0] == "t5"
    assert ids(sort_tools([fresh] + TOOLS, SortOption.OLDEST, now=NOW))[-1] == "t5"


def test_sort_does_not_modify_input():
    tools = list(TOOLS)
    sort_tools(tools, SortOption.ALPHABETICAL)

    assert ids(tools) == ["t1", "t2", "t3", "t4"]


def test_browse_combines_filter_search_and_sort():
    result = browse(TOOLS, association="Building A", query="a", sort=SortOption.ALPHABETICAL)

    assert ids(result) == ["t3", "t1"]
