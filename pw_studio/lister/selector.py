"""Structured child-page selectors.

A :class:`Selector` renders to the host's selector syntax, e.g.::

    parent=1001, summary*=coffee, sort=date desc

and :meth:`Selector.parse` reads such a string back so that stores without a
native selector engine can evaluate it.
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from ..logging_config import get_logger

logger = get_logger(__name__)

SORT_DIRECTIONS = ("asc", "desc")

_SELECTOR_RE = re.compile(
    r"""^\s*parent=(?P<parent>\d+)
        (?:\s*,\s*(?P<by>[-\w.]+)\*=(?P<q>.*?))?
        (?:\s*,\s*sort=(?P<sort>[-\w.]+)(?:\s+(?P<dir>asc|desc))?)?
        \s*$""",
    re.VERBOSE | re.IGNORECASE,
)


@dataclass(frozen=True)
class Selector:
    """Children of one parent, optionally text-filtered, sorted."""

    parent_id: int
    match: Optional[Tuple[str, str]] = None
    sort_field: str = "title"
    sort_dir: str = "asc"

    def __str__(self) -> str:
        parts = [f"parent={self.parent_id}"]
        if self.match is not None:
            by, q = self.match
            parts.append(f"{by}*={q}")
        parts.append(f"sort={self.sort_field} {self.sort_dir}")
        return ", ".join(parts)

    @property
    def descending(self) -> bool:
        return self.sort_dir == "desc"

    @classmethod
    def parse(cls, selector: str) -> "Selector":
        """Parse a selector string produced by :meth:`__str__`.

        Args:
            selector: Selector string.

        Returns:
            The structured selector.

        Raises:
            ValueError: If the string is not a child-page selector.
        """
        logger.debug("Parsing selector: %s", selector)
        m = _SELECTOR_RE.match(selector or "")
        if not m:
            logger.error("Unsupported selector: %s", selector)
            raise ValueError(f"Unsupported selector: {selector!r}")

        match = None
        if m.group("by") is not None and m.group("q"):
            match = (m.group("by"), m.group("q").strip())

        return cls(
            parent_id=int(m.group("parent")),
            match=match,
            sort_field=m.group("sort") or "title",
            sort_dir=(m.group("dir") or "asc").lower(),
        )
