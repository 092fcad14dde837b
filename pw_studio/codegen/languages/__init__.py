"""
Language-specific snippet generators.

This module contains generators for different target languages.
"""

from .php import PhpSnippetGenerator, create_php_generator

__all__ = ["PhpSnippetGenerator", "create_php_generator"]
