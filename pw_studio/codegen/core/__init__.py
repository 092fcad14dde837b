"""
Core code generation components.

Provides base classes and utilities used by all language generators.
"""

from .generator import (
    CodeGenerator,
    GeneratorError,
    GenerationResult,
    generate_code,
    TITLE_FIELD,
)
from .schema import (
    FieldKind,
    FieldDescriptor,
    TemplateDescriptor,
    DISPLAY_SAFE_KINDS,
    SYSTEM_FIELD_NAMES,
    is_rich_text,
)
from .naming import NameSanitizer, get_sanitizer, indent_code, normalize_comment
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GeneratorError",
    "GenerationResult",
    "generate_code",
    "TITLE_FIELD",
    # Schema system - core data structures
    "FieldKind",
    "FieldDescriptor",
    "TemplateDescriptor",
    "DISPLAY_SAFE_KINDS",
    "SYSTEM_FIELD_NAMES",
    "is_rich_text",
    # Naming utilities
    "NameSanitizer",
    "get_sanitizer",
    "indent_code",
    "normalize_comment",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
