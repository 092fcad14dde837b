"""
Naming utilities for safe code generation.

Handles sanitization of field names, page/template names and free text
coming from requests, plus small text helpers shared by the generators.
"""

import re
from typing import Any


class NameSanitizer:
    """Cleans untrusted tokens before they reach generated code or selectors."""

    NAME_MAX_LENGTH = 128
    TEXT_MAX_LENGTH = 255

    def field_name(self, value: Any) -> str:
        """
        Sanitize a value into a field name token.

        Surrounding whitespace is dropped, then every character outside
        ``[A-Za-z0-9_]`` becomes an underscore. Underscores already in the
        name are kept, so ``body_`` and ``_note`` stay distinct fields.

        Args:
            value: Raw field name

        Returns:
            Sanitized name (empty for empty input)
        """
        if value is None:
            return ""

        cleaned = re.sub(r"[^a-zA-Z0-9_]", "_", str(value).strip())
        return cleaned[: self.NAME_MAX_LENGTH]

    def name(self, value: Any) -> str:
        """
        Sanitize a value into a page/template name token.

        Args:
            value: Raw name

        Returns:
            Sanitized name (may be empty)
        """
        if value is None:
            return ""

        cleaned = re.sub(r"[^-_.a-zA-Z0-9]", "_", str(value).strip())
        cleaned = cleaned.strip("-_.")
        return cleaned[: self.NAME_MAX_LENGTH]

    def text(self, value: Any) -> str:
        """
        Sanitize a value into single-line plain text.

        Args:
            value: Raw text

        Returns:
            Text without markup or line breaks
        """
        if value is None:
            return ""

        cleaned = re.sub(r"<[^>]*>", "", str(value))
        cleaned = re.sub(r"\s+", " ", cleaned).strip()
        return cleaned[: self.TEXT_MAX_LENGTH].strip()


def normalize_comment(text: Any) -> str:
    """Collapse text into a single line safe for a one-line code comment."""
    text = re.sub(r"\s+", " ", str(text or ""))
    # Don't let a label close a PHP block early
    text = text.replace("?>", "? >")
    return text.strip()


def indent_code(code: str, spaces: int = 4) -> str:
    """Indent all non-blank lines in a block of code."""
    indent = " " * spaces
    lines = code.split("\n")
    return "\n".join(indent + line if line.strip() else "" for line in lines)


# Default sanitizer instance
_default_sanitizer = None


def get_sanitizer() -> NameSanitizer:
    """Get the shared sanitizer instance."""
    global _default_sanitizer
    if _default_sanitizer is None:
        _default_sanitizer = NameSanitizer()
    return _default_sanitizer
