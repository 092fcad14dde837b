"""
Selector building from request parameters.

Turns the raw ``q``/``by``/``sort``/``dir`` query parameters of a listing
request into a child-page selector plus the filter state the UI displays.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..codegen.core.generator import TITLE_FIELD
from ..codegen.core.naming import get_sanitizer
from ..logging_config import get_logger
from .selector import Selector

logger = get_logger(__name__)


@dataclass(frozen=True)
class ActiveFilterState:
    """Filter shown as active in the listing, rebuilt for every request."""

    by: Optional[str] = None
    q: Optional[str] = None
    sort: Optional[str] = None
    dir: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.to_dict()

    def __bool__(self) -> bool:
        return not self.is_empty

    def to_dict(self) -> Dict[str, str]:
        """Set entries only, in query-string order."""
        items = (("q", self.q), ("by", self.by), ("sort", self.sort), ("dir", self.dir))
        return {key: value for key, value in items if value}


def request_param(params: Optional[Mapping[str, Any]], key: str) -> Any:
    """Single value of a request parameter; repeated parameters use the first."""
    if not params:
        return None
    value = params.get(key)
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def build_query(
    parent: Any, field_names: Sequence[str], params: Optional[Mapping[str, Any]]
) -> Tuple[Selector, ActiveFilterState, List[str]]:
    """
    Build the structured child selector for a listing request.

    ``by`` must name one of the allowed fields (``title`` plus the display
    fields) or it falls back to ``title``. A text clause is only added for a
    non-empty ``q``, and only then is the filter state non-empty. ``sort``
    is taken as given; it is not checked against the allowed fields.

    Args:
        parent: Container page (or its id)
        field_names: Display fields of the listing
        params: Raw request parameters

    Returns:
        Tuple of (selector, active filter state, allowed field names)
    """
    sanitizer = get_sanitizer()

    parent_id = getattr(parent, "id", parent)
    try:
        parent_id = int(parent_id)
    except (TypeError, ValueError):
        parent_id = 0

    allowed = [TITLE_FIELD] + [name for name in field_names if name != TITLE_FIELD]

    by = sanitizer.name(request_param(params, "by")) or TITLE_FIELD
    if by not in allowed:
        logger.debug("Search field %s not allowed, using %s", by, TITLE_FIELD)
        by = TITLE_FIELD

    q = sanitizer.text(request_param(params, "q"))
    match = None
    active = ActiveFilterState()
    if q:
        match = (by, q)
        active = ActiveFilterState(by=by, q=q)

    sort = sanitizer.name(request_param(params, "sort")) or TITLE_FIELD
    direction = "desc" if sanitizer.text(request_param(params, "dir")).lower() == "desc" else "asc"

    selector = Selector(parent_id=parent_id, match=match, sort_field=sort, sort_dir=direction)
    logger.debug("Built selector: %s", selector)
    return selector, active, allowed


def build_selector(
    parent: Any, field_names: Sequence[str], params: Optional[Mapping[str, Any]]
) -> Tuple[str, ActiveFilterState, List[str]]:
    """Like :func:`build_query`, with the selector rendered as a string."""
    selector, active, allowed = build_query(parent, field_names, params)
    return str(selector), active, allowed
