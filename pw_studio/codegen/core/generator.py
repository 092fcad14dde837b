"""
Base generator interface for all snippet generation targets.

Defines the contract that all language generators must implement.
"""

from abc import ABC, abstractmethod
from typing import Dict, FrozenSet, List, Any, Optional, Tuple, Iterable, TYPE_CHECKING
from pathlib import Path

from .schema import TemplateDescriptor, FieldDescriptor, FieldKind
from .config import GeneratorConfig, load_config
from .naming import get_sanitizer
from .templates import TemplateEngine, create_template_engine
from ...logging_config import get_logger

if TYPE_CHECKING:
    from ...host import SchemaProvider

logger = get_logger(__name__)

# Every page has a title, even though it is not a configurable field
TITLE_FIELD = "title"


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class CodeGenerator(ABC):
    """Abstract base class for all snippet generators."""

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        schema: Optional["SchemaProvider"] = None,
    ):
        """
        Initialize generator.

        Args:
            config: Generator configuration (defaults when omitted)
            schema: Schema provider used to resolve nested templates
        """
        self.config = config or load_config(self.language_name)
        self.schema = schema
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        self._template_engine = create_template_engine(self.get_template_directory())

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'php')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.php')."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Return None to use in-memory templates only.
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @abstractmethod
    def generate(
        self, template: Optional[TemplateDescriptor], selected_field_names: Iterable[Any]
    ) -> str:
        """
        Generate code for the selected fields of a template.

        Args:
            template: Resolved template, or None when it did not resolve
            selected_field_names: Field names requested by the caller

        Returns:
            Generated code, or an empty string when there is nothing to emit
        """
        pass

    @abstractmethod
    def generate_field(
        self,
        field: FieldDescriptor,
        page_var: str,
        depth: int = 0,
        expanding: FrozenSet[str] = frozenset(),
    ) -> str:
        """
        Generate the accessor snippet for a single field.

        Args:
            field: Field to generate code for
            page_var: Variable holding the page (or repeater item)
            depth: Repeater nesting depth
            expanding: Repeater templates already open on this path

        Returns:
            Snippet code
        """
        pass

    def resolve_selection(
        self, template: TemplateDescriptor, selected_field_names: Iterable[Any]
    ) -> List[Tuple[str, Optional[FieldDescriptor]]]:
        """
        Filter a caller selection down to fields the template really has.

        Names are sanitized and deduplicated in selection order. The pseudo
        field ``title`` is always kept (with no descriptor); every other name
        must exist in the template's fieldgroup or it is dropped.

        Args:
            template: Resolved template
            selected_field_names: Raw names requested by the caller

        Returns:
            Ordered (name, descriptor) pairs
        """
        sanitizer = get_sanitizer()

        selected: List[str] = []
        for raw in selected_field_names or []:
            name = sanitizer.field_name(raw)
            if name and name not in selected:
                selected.append(name)

        fields_by_name = {f.name: f for f in template.fields}

        resolved = []
        for name in selected:
            if name == TITLE_FIELD:
                resolved.append((name, None))
            elif name in fields_by_name:
                resolved.append((name, fields_by_name[name]))
            else:
                logger.debug(
                    "Dropping field %s: not part of template %s", name, template.name
                )

        return resolved

    def resolve_template(self, ref: Any) -> Optional[TemplateDescriptor]:
        """Resolve a template reference through the schema provider."""
        if self.schema is None or ref is None:
            return None
        return self.schema.get_template(ref)

    def validate_template(
        self, template: TemplateDescriptor, field_names: Optional[Iterable[str]] = None
    ) -> List[str]:
        """
        Check a template for fields that will only get generic code.

        Args:
            template: Template to check
            field_names: Restrict the check to these fields

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []

        if not template.fields:
            warnings.append(f"Template '{template.name}' has no fields")

        wanted = set(field_names) if field_names is not None else None

        for f in template.fields:
            if wanted is not None and f.name not in wanted:
                continue
            if f.kind == FieldKind.UNKNOWN:
                warnings.append(
                    f"Field {template.name}.{f.name} has unsupported type "
                    f"'{f.type_name or 'unknown'}', generic output used"
                )
            elif f.kind == FieldKind.REPEATER and self.resolve_template(f.repeater_template) is None:
                warnings.append(
                    f"Repeater {template.name}.{f.name} has no resolvable item template"
                )

        return warnings

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a template with context."""
        return self.template_engine.render_template(template_name, context)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self, code: str, warnings: List[str] = None, metadata: Dict[str, Any] = None
    ):
        """
        Initialize generation result.

        Args:
            code: Generated code
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.code = code
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(code="")
        result.success = False
        result.error_message = message
        result.exception = exception
        return result

    def to_response(self) -> Dict[str, Any]:
        """Return the JSON envelope used by the admin endpoint."""
        if self.success:
            return {"success": True, "code": self.code}
        return {"success": False, "error": self.error_message}


def generate_code(
    generator: CodeGenerator,
    template: Optional[TemplateDescriptor],
    selected_field_names: Iterable[Any],
) -> GenerationResult:
    """
    Generate code using the specified generator with error handling.

    Args:
        generator: Code generator instance
        template: Template to generate code for (None when unresolved)
        selected_field_names: Field names requested by the caller

    Returns:
        GenerationResult with code, warnings, and metadata
    """
    try:
        selected = list(selected_field_names or [])
        code = generator.generate(template, selected)

        warnings = []
        emitted: List[str] = []
        generic: List[str] = []
        if template is not None and code:
            resolved = generator.resolve_selection(template, selected)
            emitted = [name for name, _ in resolved]
            generic = [
                name for name, f in resolved if f is not None and f.kind == FieldKind.UNKNOWN
            ]
            if emitted:
                warnings = generator.validate_template(template, emitted)

        metadata = {
            "language": generator.language_name,
            "file_extension": generator.file_extension,
            "template": template.name if template is not None else None,
            "field_count": len(emitted),
            "fields": emitted,
            "generic_fields": generic,
        }

        return GenerationResult(code, warnings, metadata)

    except Exception as e:
        logger.error("Code generation failed: %s", e)
        return GenerationResult.error(f"Code generation failed: {str(e)}", exception=e)
