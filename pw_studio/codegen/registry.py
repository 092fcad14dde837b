"""
Generator registry.

Maps a language name (or alias) to the snippet generator that targets it.
"""

from typing import Dict, Type, Optional, Any, List, Union
from pathlib import Path

from .core.generator import CodeGenerator
from .core.config import GeneratorConfig, load_config


class RegistryError(Exception):
    """Exception raised for registry-related errors."""

    pass


class GeneratorRegistry:
    """Registry for managing available snippet generators."""

    def __init__(self):
        self._generators: Dict[str, Type[CodeGenerator]] = {}
        self._aliases: Dict[str, str] = {}

    def register(
        self,
        language: str,
        generator_class: Type[CodeGenerator],
        aliases: Optional[List[str]] = None,
    ):
        """
        Register a generator for a language.

        Args:
            language: Primary language name (e.g., 'php')
            generator_class: Generator class implementing CodeGenerator
            aliases: Alternative names for this language
        """
        language_key = language.lower()
        self._generators[language_key] = generator_class
        for alias in aliases or []:
            self._aliases[alias.lower()] = language_key

    def resolve(self, language: str) -> str:
        """
        Primary name for a language or alias.

        Raises:
            RegistryError: If language not found
        """
        language_key = language.lower()
        language_key = self._aliases.get(language_key, language_key)

        if language_key not in self._generators:
            raise RegistryError(
                f"No generator registered for language: {language}. "
                f"Available: {', '.join(self.list_languages())}"
            )
        return language_key

    def create_generator(
        self,
        language: str,
        config: Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]] = None,
        schema=None,
    ) -> CodeGenerator:
        """
        Create generator instance for language.

        Args:
            language: Language name or alias
            config: Configuration as GeneratorConfig, dict, or file path
            schema: Schema provider handed to the generator

        Returns:
            Configured generator instance

        Raises:
            RegistryError: If the language is unknown or the config is unusable
        """
        language_key = self.resolve(language)

        if isinstance(config, GeneratorConfig):
            final_config = config
        elif isinstance(config, (str, Path)):
            final_config = load_config(language_key, config_file=config)
        elif isinstance(config, dict):
            final_config = load_config(language_key, custom_config=config)
        elif config is None:
            final_config = load_config(language_key)
        else:
            raise RegistryError(f"Invalid config type: {type(config)}")

        return self._generators[language_key](final_config, schema)

    def list_languages(self) -> List[str]:
        """Get list of registered primary language names."""
        return sorted(self._generators.keys())


# Global registry instance - created once
_global_registry: Optional[GeneratorRegistry] = None


def get_registry() -> GeneratorRegistry:
    """Get the global generator registry, initializing if needed."""
    global _global_registry
    if _global_registry is None:
        _global_registry = GeneratorRegistry()
        _auto_register_generators(_global_registry)
    return _global_registry


def _auto_register_generators(registry: GeneratorRegistry):
    """Register the generators shipped with the package."""
    from .languages.php import PhpSnippetGenerator

    registry.register("php", PhpSnippetGenerator, aliases=["processwire", "pw"])


def get_generator(
    language: str = "php",
    config: Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]] = None,
    schema=None,
) -> CodeGenerator:
    """Get generator instance from the global registry."""
    return get_registry().create_generator(language, config, schema)


def list_supported_languages() -> List[str]:
    """List all supported languages from global registry."""
    return get_registry().list_languages()
