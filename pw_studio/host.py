"""Interfaces to the host CMS.

The generator and the lister never talk to a CMS directly; they consume the
three collaborators defined here. :mod:`pw_studio.snapshot` provides an
in-memory implementation of all of them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from .codegen.core.schema import TemplateDescriptor
from .logging_config import get_logger

logger = get_logger(__name__)

TemplateRef = Union[int, str]


@dataclass(frozen=True)
class PageRef:
    """Lightweight reference to another page, as stored in page fields."""

    id: int
    title: str = ""
    url: str = ""

    def __str__(self) -> str:
        return self.title


@dataclass(frozen=True)
class PageNode:
    """Read-only view of a content page."""

    id: int
    name: str = ""
    title: str = ""
    template: str = ""
    parent_id: int = 0
    url: str = ""
    values: Mapping[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        """Return a field value or one of the built-in page properties."""
        if name in ("id", "name", "title", "template", "url"):
            return getattr(self, name)
        if name == "parent":
            return self.parent_id
        return self.values.get(name, default)


class SchemaProvider(ABC):
    """Resolves templates and their fieldgroups."""

    @abstractmethod
    def get_template(self, ref: TemplateRef) -> Optional[TemplateDescriptor]:
        """Resolve a template by id or name, None when it does not exist."""

    @abstractmethod
    def templates(self) -> List[TemplateDescriptor]:
        """All templates in definition order, system templates included."""


class ContentStore(ABC):
    """Resolves and queries pages."""

    @abstractmethod
    def get_page(self, page_id: int) -> Optional[PageNode]:
        """Resolve a page by id, None when it does not exist."""

    @abstractmethod
    def children(self, page: PageNode, limit: Optional[int] = None) -> List[PageNode]:
        """Direct children of a page in their natural order."""

    @abstractmethod
    def find(self, selector: str, start: int = 0, limit: Optional[int] = None) -> List[PageNode]:
        """One page of results for a selector string."""

    @abstractmethod
    def count(self, selector: str) -> int:
        """Total number of pages matching a selector string."""


class ConfigStore(ABC):
    """Reads and writes the tool's settings blob."""

    @abstractmethod
    def get_config(self) -> Dict[str, Any]:
        """Return a copy of the stored settings blob."""

    @abstractmethod
    def save_config(self, data: Dict[str, Any]) -> None:
        """Replace the stored settings blob."""


def available_templates(schema: SchemaProvider) -> List[TemplateDescriptor]:
    """
    Templates offered to the user, system templates excluded.

    Sorted case-insensitively by label, falling back to the name.
    """
    templates = [t for t in schema.templates() if not t.is_system]
    return sorted(templates, key=lambda t: t.display_label.lower())


def template_field_rows(schema: SchemaProvider, template_ref: TemplateRef) -> List[Dict[str, Any]]:
    """
    Per-field metadata of a template, as shown in the field picker.

    Args:
        schema: Schema provider
        template_ref: Template id or name

    Returns:
        One row per field, or an empty list if the template does not resolve
    """
    template = schema.get_template(template_ref)
    if template is None:
        logger.debug("Template %r not found, no field rows", template_ref)
        return []

    return [
        {
            "id": f.id,
            "name": f.name,
            "label": f.display_label,
            "type": f.type_name or str(f.kind),
            "description": f.description,
            "required": f.required,
        }
        for f in template.fields
    ]


def value_text(value: Any) -> str:
    """Plain text form of a field value for display and text matching."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, (PageRef, PageNode)):
        return value.title
    if isinstance(value, (list, tuple)):
        return ", ".join(value_text(v) for v in value)
    return str(value)
