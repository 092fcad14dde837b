"""
PHP snippet generator module.

Generates ProcessWire template-file code for template fields.
"""

from .generator import (
    PhpSnippetGenerator,
    SNIPPET_STRATEGIES,
    create_php_generator,
    generate_snippets,
    php_single_quoted,
)

__all__ = [
    "PhpSnippetGenerator",
    "SNIPPET_STRATEGIES",
    "create_php_generator",
    "generate_snippets",
    "php_single_quoted",
]
