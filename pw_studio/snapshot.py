"""In-memory site snapshot.

Loads an exported site (templates, pages and the tool's settings blob) from a
JSON file or URL and serves it through the host collaborator interfaces, so
the generator and the lister can run outside the CMS.

Expected document shape::

    {
      "templates": [{"id": 44, "name": "blog-post", "fields": [...]}, ...],
      "pages": [{"id": 1001, "parent": 1, "template": "blog", "title": "Blog",
                 "fields": {"date": "2024-03-01", ...}}, ...],
      "settings": {"dataPageListerTemplates": ["blog"], ...}
    }
"""

import copy
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlparse

import dateparser
import requests

from .codegen.core.schema import FieldKind, TemplateDescriptor
from .host import (
    ConfigStore,
    ContentStore,
    PageNode,
    PageRef,
    SchemaProvider,
    TemplateRef,
    value_text,
)
from .lister.selector import Selector
from .logging_config import get_logger

logger = get_logger(__name__)

DATEPARSER_SETTINGS = {"TIMEZONE": "UTC", "RETURN_AS_TIMEZONE_AWARE": True}


class SnapshotError(Exception):
    """Custom exception for snapshot loading errors."""

    pass


class SiteSnapshot(SchemaProvider, ContentStore, ConfigStore):
    """Schema, content and settings of a site held in memory."""

    def __init__(
        self,
        templates: Iterable[TemplateDescriptor],
        pages: Iterable[PageNode],
        settings: Optional[Dict[str, Any]] = None,
        source: str = "<memory>",
    ):
        self._templates: List[TemplateDescriptor] = list(templates)
        self._pages: Dict[int, PageNode] = {p.id: p for p in pages}
        self._settings: Dict[str, Any] = dict(settings or {})
        self.source = source
        logger.debug(
            "Snapshot %s: %d templates, %d pages",
            source,
            len(self._templates),
            len(self._pages),
        )

    # Schema provider

    def get_template(self, ref: TemplateRef) -> Optional[TemplateDescriptor]:
        if ref is None or isinstance(ref, bool):
            return None

        if isinstance(ref, int) or (isinstance(ref, str) and ref.strip().isdigit()):
            template_id = int(ref)
            for t in self._templates:
                if t.id == template_id:
                    return t
            return None

        for t in self._templates:
            if t.name == ref:
                return t
        return None

    def templates(self) -> List[TemplateDescriptor]:
        return list(self._templates)

    # Content store

    def get_page(self, page_id: int) -> Optional[PageNode]:
        try:
            return self._pages.get(int(page_id))
        except (TypeError, ValueError):
            return None

    def children(self, page: PageNode, limit: Optional[int] = None) -> List[PageNode]:
        kids = [p for p in self._pages.values() if p.parent_id == page.id]
        return kids[:limit] if limit is not None else kids

    def find(self, selector: str, start: int = 0, limit: Optional[int] = None) -> List[PageNode]:
        matches = self._evaluate(selector)
        start = max(0, int(start))
        end = start + int(limit) if limit is not None else None
        return matches[start:end]

    def count(self, selector: str) -> int:
        return len(self._evaluate(selector))

    def _evaluate(self, selector: str) -> List[PageNode]:
        parsed = Selector.parse(selector)

        pages = [p for p in self._pages.values() if p.parent_id == parsed.parent_id]

        if parsed.match is not None:
            by, q = parsed.match
            needle = q.lower()
            pages = [p for p in pages if needle in value_text(p.get(by)).lower()]

        pages.sort(key=lambda p: _sort_key(p.get(parsed.sort_field)), reverse=parsed.descending)
        logger.debug("Selector %r matched %d page(s)", selector, len(pages))
        return pages

    # Config store

    def get_config(self) -> Dict[str, Any]:
        return copy.deepcopy(self._settings)

    def save_config(self, data: Dict[str, Any]) -> None:
        self._settings = copy.deepcopy(dict(data))
        logger.info("Settings saved to snapshot %s", self.source)

    # Construction

    @classmethod
    def from_dict(cls, data: Any, source: str = "<memory>") -> "SiteSnapshot":
        """Build a snapshot from a parsed site document.

        Raises:
            SnapshotError: If the document is not a JSON object.
        """
        if not isinstance(data, dict):
            raise SnapshotError(f"Site snapshot must be a JSON object: {source}")

        templates = []
        for raw in data.get("templates") or []:
            if not isinstance(raw, dict) or not raw.get("name"):
                logger.warning("Skipping malformed template entry in %s", source)
                continue
            templates.append(TemplateDescriptor.from_dict(raw))

        by_name = {t.name: t for t in templates}

        raw_pages = [p for p in data.get("pages") or [] if isinstance(p, dict)]
        titles = {}
        for raw in raw_pages:
            page_id = _as_page_id(raw.get("id"))
            if page_id:
                titles[page_id] = (str(raw.get("title") or ""), str(raw.get("url") or ""))

        pages = []
        for raw in raw_pages:
            page_id = _as_page_id(raw.get("id"))
            if not page_id:
                logger.warning("Skipping page without id in %s", source)
                continue

            template_name = str(raw.get("template") or "")
            values = raw.get("fields", raw.get("values"))
            values = dict(values) if isinstance(values, dict) else {}
            template = by_name.get(template_name)
            if template is not None:
                values = _normalize_values(template, values, titles)

            pages.append(
                PageNode(
                    id=page_id,
                    name=str(raw.get("name") or ""),
                    title=str(raw.get("title") or ""),
                    template=template_name,
                    parent_id=_as_page_id(raw.get("parent", raw.get("parent_id"))),
                    url=str(raw.get("url") or ""),
                    values=values,
                )
            )

        settings = data.get("settings")
        if settings is not None and not isinstance(settings, dict):
            logger.warning("Ignoring settings in %s: not a JSON object", source)
            settings = None

        return cls(templates, pages, settings, source)


def normalize_datetime(value: Any) -> Optional[int]:
    """Convert a datetime field value to a Unix timestamp.

    Numbers are taken as timestamps already; strings are parsed with
    dateparser. Unparseable values become None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)

    text = str(value).strip()
    if text.lstrip("-").isdigit():
        return int(text)

    parsed = dateparser.parse(text, settings=DATEPARSER_SETTINGS)
    if parsed is None:
        logger.warning("Could not parse datetime value %r", value)
        return None
    return int(parsed.timestamp())


def _normalize_values(
    template: TemplateDescriptor, values: Dict[str, Any], titles: Dict[int, tuple]
) -> Dict[str, Any]:
    """Resolve page references and datetime strings in a page's values."""

    def ref(raw):
        page_id = _as_page_id(raw)
        if page_id not in titles:
            logger.debug("Dropping reference to unknown page %r", raw)
            return None
        title, url = titles[page_id]
        return PageRef(page_id, title, url)

    out = dict(values)
    for f in template.fields:
        if f.name not in out:
            continue
        value = out[f.name]

        if f.kind == FieldKind.DATETIME:
            out[f.name] = normalize_datetime(value)
        elif f.kind == FieldKind.PAGE:
            if isinstance(value, (list, tuple)):
                out[f.name] = [r for r in (ref(v) for v in value) if r is not None]
            elif value is not None:
                out[f.name] = ref(value)
    return out


def _as_page_id(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _sort_key(value: Any):
    if value is None or value == "" or value == []:
        return (0, 0, "")
    if isinstance(value, (bool, int, float)):
        return (1, float(value), "")
    return (2, 0, value_text(value).lower())


def load_snapshot_from_file(file_path: str | Path) -> SiteSnapshot:
    """Load a site snapshot from a local JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist.
        SnapshotError: If the file cannot be read or is not a site document.
    """
    file_path = Path(file_path)
    logger.debug("Loading site snapshot from file: %s", file_path)

    if not file_path.exists():
        logger.error("File not found: %s", file_path)
        raise FileNotFoundError(f"File not found: {file_path}")

    try:
        with file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in file %s: %s", file_path, e)
        raise SnapshotError(f"Invalid JSON in file {file_path}: {e}") from e
    except OSError as e:
        logger.error("Error reading file %s: %s", file_path, e)
        raise SnapshotError(f"Error reading file {file_path}: {e}") from e

    logger.info("Loaded site snapshot from %s", file_path)
    return SiteSnapshot.from_dict(data, source=str(file_path))


def load_snapshot_from_url(url: str, timeout: int = 30) -> SiteSnapshot:
    """Fetch a site snapshot from a URL.

    Raises:
        SnapshotError: If the URL is invalid, the request fails, or the
            response isn't a site document.
    """
    logger.debug("Fetching site snapshot from URL: %s", url)

    parsed_url = urlparse(url)
    if not all([parsed_url.scheme, parsed_url.netloc]):
        logger.error("Invalid URL format: %s", url)
        raise SnapshotError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.Timeout as e:
        logger.error("Request timeout for URL: %s", url)
        raise SnapshotError(f"Request timeout for URL: {url}") from e
    except requests.exceptions.ConnectionError as e:
        logger.error("Connection error for URL %s: %s", url, e)
        raise SnapshotError(f"Connection error for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        logger.error("HTTP error %s for URL: %s", e.response.status_code, url)
        raise SnapshotError(f"HTTP error {e.response.status_code} for URL: {url}") from e
    except requests.exceptions.JSONDecodeError as e:
        logger.error("Invalid JSON response from URL %s: %s", url, e)
        raise SnapshotError(f"Invalid JSON response from URL {url}: {e}") from e
    except requests.exceptions.RequestException as e:
        logger.error("Request error for URL %s: %s", url, e)
        raise SnapshotError(f"Request error for URL {url}: {e}") from e

    logger.info("Loaded site snapshot from %s", url)
    return SiteSnapshot.from_dict(data, source=url)


def load_snapshot(
    file_path: str | Path | None = None,
    url: str | None = None,
    timeout: int = 30,
) -> SiteSnapshot:
    """Load a site snapshot from either a file or a URL.

    Raises:
        SnapshotError: If neither or both sources are given, or loading fails.
        FileNotFoundError: If the file doesn't exist.
    """
    if not file_path and not url:
        raise SnapshotError("Either file_path or url must be provided")

    if file_path and url:
        raise SnapshotError("Cannot specify both file_path and url")

    if file_path:
        return load_snapshot_from_file(file_path)
    return load_snapshot_from_url(url, timeout)
