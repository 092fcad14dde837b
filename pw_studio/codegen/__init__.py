"""
ProcessWire Studio Code Generation Module

Generates template-file snippets from template field definitions.
"""

from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    list_supported_languages,
)
from .core.generator import CodeGenerator, GeneratorError, GenerationResult, generate_code
from .core.schema import FieldKind, FieldDescriptor, TemplateDescriptor, is_rich_text
from .core.config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .core.templates import TemplateError


def generate(schema, template_ref, selected_field_names, language="php", config=None):
    """
    Generate code for a template referenced by id or name.

    Args:
        schema: Schema provider used to resolve templates
        template_ref: Template id or name
        selected_field_names: Field names requested by the caller
        language: Target language name
        config: Generator configuration dict, path or GeneratorConfig

    Returns:
        Generated code, or an empty string if the template does not resolve
        or nothing in the selection survives filtering
    """
    template = schema.get_template(template_ref)
    generator = get_generator(language, config, schema)
    return generator.generate(template, selected_field_names)


def generate_result(schema, template_ref, selected_field_names, language="php", config=None):
    """
    Generate code and wrap it in a GenerationResult.

    Returns:
        GenerationResult with code, warnings, and metadata
    """
    try:
        generator = get_generator(language, config, schema)
    except RegistryError as e:
        return GenerationResult.error(str(e), exception=e)

    template = schema.get_template(template_ref)
    return generate_code(generator, template, selected_field_names)


# Export main interfaces
__all__ = [
    "GeneratorRegistry",
    "RegistryError",
    "CodeGenerator",
    "GeneratorError",
    "GenerationResult",
    "FieldKind",
    "FieldDescriptor",
    "TemplateDescriptor",
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "TemplateError",
    "is_rich_text",
    "load_config",
    "generate",
    "generate_code",
    "generate_result",
    "get_generator",
    "list_supported_languages",
]
