"""
Data Page Lister

Tabular listing of the children of configured container pages.
"""

from .cells import format_cell
from .field_selector import DataPageLister, ListerOverview
from .filter import ActiveFilterState, build_query, build_selector
from .pagination import page_count, page_number, page_start, page_window, pager_query
from .selector import Selector

__all__ = [
    "DataPageLister",
    "ListerOverview",
    "ActiveFilterState",
    "Selector",
    "build_query",
    "build_selector",
    "format_cell",
    "page_count",
    "page_number",
    "page_start",
    "page_window",
    "pager_query",
]
