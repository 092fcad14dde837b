"""Pagination helpers for the listing."""

import math
from typing import Any, Dict, List, Mapping, Optional, Union

from .filter import ActiveFilterState, request_param

ELLIPSIS = "..."

# Up to this many pages every page gets a link
FULL_WINDOW = 7

PagerItem = Union[int, str]


def page_number(params: Optional[Mapping[str, Any]]) -> int:
    """Requested page number (``pg``), at least 1."""
    raw = request_param(params, "pg")
    try:
        return max(1, int(raw))
    except (TypeError, ValueError):
        return 1


def page_start(page_num: int, page_size: int) -> int:
    return (max(1, page_num) - 1) * page_size


def page_count(total: int, page_size: int) -> int:
    if page_size <= 0:
        return 1
    return max(1, math.ceil(total / page_size))


def page_window(page_num: int, pages: int) -> List[PagerItem]:
    """
    Page links to show around the current page.

    All pages are listed when there are few of them; otherwise the first and
    last page plus the neighbours of the current one, with ``"..."`` for gaps.
    A single page needs no pager and gives an empty list.
    """
    if pages <= 1:
        return []

    if pages <= FULL_WINDOW:
        return list(range(1, pages + 1))

    window: List[PagerItem] = [1]
    if page_num > 3:
        window.append(ELLIPSIS)
    window.extend(range(max(2, page_num - 1), min(pages - 1, page_num + 1) + 1))
    if page_num < pages - 2:
        window.append(ELLIPSIS)
    window.append(pages)
    return window


def pager_query(active: ActiveFilterState, page_num: int) -> Dict[str, Any]:
    """Query parameters for a pager link, carrying the active filter."""
    query: Dict[str, Any] = dict(active.to_dict())
    query["pg"] = int(page_num)
    return query
