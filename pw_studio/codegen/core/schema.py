"""
Core schema representation for code generation.

Converts host template/field metadata into a normalized, read-only format
that the snippet generator and the data page lister can work with consistently.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Tuple
from enum import Enum

from ...logging_config import get_logger

logger = get_logger(__name__)


class FieldKind(Enum):
    """Supported field kinds, keyed by the host's field-type class name."""

    TEXT = "FieldtypeText"
    TEXTAREA = "FieldtypeTextarea"
    PAGE_TITLE = "FieldtypePageTitle"
    IMAGE = "FieldtypeImage"
    PAGE = "FieldtypePage"
    REPEATER = "FieldtypeRepeater"
    OPTIONS = "FieldtypeOptions"
    DATETIME = "FieldtypeDatetime"
    URL = "FieldtypeURL"
    EMAIL = "FieldtypeEmail"
    INTEGER = "FieldtypeInteger"
    FLOAT = "FieldtypeFloat"
    CHECKBOX = "FieldtypeCheckbox"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_type_name(cls, type_name: Optional[str]) -> "FieldKind":
        """Map a free-form field-type class name onto a kind.

        Names without a dedicated kind map to ``UNKNOWN``.
        """
        if not type_name:
            return cls.UNKNOWN
        for member in cls:
            if member.value == type_name:
                return member
        return cls.UNKNOWN


# Kinds whose values are rendered as plain text
TEXT_KINDS = frozenset({FieldKind.TEXT, FieldKind.TEXTAREA, FieldKind.PAGE_TITLE})

# Kinds the data page lister can render in a table cell
DISPLAY_SAFE_KINDS = frozenset(
    {
        FieldKind.TEXT,
        FieldKind.TEXTAREA,
        FieldKind.PAGE_TITLE,
        FieldKind.INTEGER,
        FieldKind.FLOAT,
        FieldKind.CHECKBOX,
        FieldKind.DATETIME,
        FieldKind.EMAIL,
        FieldKind.URL,
        FieldKind.OPTIONS,
        FieldKind.PAGE,
    }
)

# Built-in page properties never offered as listing columns
SYSTEM_FIELD_NAMES = ("title", "name", "sort", "created", "modified", "status")

# Input control class name fragments that identify a rich text editor
RICH_EDITOR_MARKERS = ("tinymce", "ckeditor")

CONTENT_TYPE_HTML = 1


@dataclass(frozen=True)
class FieldDescriptor:
    """Read-only projection of a single template field."""

    name: str
    kind: FieldKind = FieldKind.UNKNOWN
    label: str = ""
    type_name: str = ""
    description: str = ""
    required: bool = False
    id: int = 0

    # Images: 0 means unlimited
    max_files: int = 0

    # Page references: 1 means a single page
    deref_as_page: int = 0

    # Textareas: 1 means HTML content
    content_type: int = 0

    # Class name of the configured input control
    input_class: str = ""

    # Repeaters: name of the sub-template holding the item fields
    repeater_template: Optional[str] = None

    @property
    def display_label(self) -> str:
        return self.label or self.name

    @property
    def multi_valued(self) -> bool:
        """Whether the field holds a collection rather than a single value."""
        if self.kind == FieldKind.IMAGE:
            return self.max_files != 1
        if self.kind == FieldKind.PAGE:
            return self.deref_as_page != 1
        return self.kind == FieldKind.REPEATER

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldDescriptor":
        """Build a descriptor from a host field export.

        Missing or mistyped attributes fall back to their defaults.
        """
        type_name = str(data.get("type") or "")
        repeater = data.get("repeaterTemplate", data.get("repeater_template"))

        return cls(
            name=str(data.get("name") or ""),
            kind=FieldKind.from_type_name(type_name),
            label=str(data.get("label") or ""),
            type_name=type_name,
            description=str(data.get("description") or ""),
            required=bool(data.get("required", False)),
            id=_as_int(data.get("id")),
            max_files=_as_int(data.get("maxFiles", data.get("max_files"))),
            deref_as_page=_as_int(data.get("derefAsPage", data.get("deref_as_page"))),
            content_type=_as_int(data.get("contentType", data.get("content_type"))),
            input_class=str(data.get("inputfieldClass", data.get("input_class")) or ""),
            repeater_template=str(repeater) if repeater else None,
        )


@dataclass(frozen=True)
class TemplateDescriptor:
    """Read-only projection of a template and its fieldgroup."""

    name: str
    id: int = 0
    label: str = ""
    fields: Tuple[FieldDescriptor, ...] = field(default_factory=tuple)
    child_template_names: Tuple[str, ...] = field(default_factory=tuple)
    is_system: bool = False

    @property
    def display_label(self) -> str:
        return self.label or self.name

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> Optional[FieldDescriptor]:
        """Get field by name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TemplateDescriptor":
        """Build a template descriptor from a host template export."""
        fields = []
        for raw in data.get("fields") or []:
            if not isinstance(raw, dict):
                logger.warning(
                    "Skipping malformed field entry in template %s", data.get("name")
                )
                continue
            descriptor = FieldDescriptor.from_dict(raw)
            if descriptor.name:
                fields.append(descriptor)

        children = data.get("childTemplates", data.get("child_templates")) or []

        return cls(
            name=str(data.get("name") or ""),
            id=_as_int(data.get("id")),
            label=str(data.get("label") or ""),
            fields=tuple(fields),
            child_template_names=tuple(str(c) for c in children if c),
            is_system=bool(data.get("system", data.get("is_system", False))),
        )


def is_rich_text(field_descriptor: FieldDescriptor) -> bool:
    """
    Decide whether a text-like field holds HTML.

    A textarea that declares the HTML content type is rich text. Otherwise the
    configured input control is inspected: a class name naming a known rich
    editor (TinyMCE, CKEditor) marks the field as rich text as well.

    Args:
        field_descriptor: Field to inspect

    Returns:
        True when the value should be purified rather than escaped
    """
    if field_descriptor.kind not in TEXT_KINDS:
        return False

    if (
        field_descriptor.kind == FieldKind.TEXTAREA
        and field_descriptor.content_type == CONTENT_TYPE_HTML
    ):
        return True

    input_class = field_descriptor.input_class.lower()
    return any(marker in input_class for marker in RICH_EDITOR_MARKERS)


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
