"""
PHP snippet generator implementation.

Generates template-file accessor code for the fields of a ProcessWire
template using one snippet template per field kind.
"""

from typing import Any, Callable, Dict, FrozenSet, Iterable, Optional
from pathlib import Path

from ...core.generator import CodeGenerator, TITLE_FIELD
from ...core.schema import FieldDescriptor, FieldKind, TemplateDescriptor, is_rich_text
from ...core.naming import get_sanitizer, indent_code, normalize_comment
from ...core.config import GeneratorConfig
from ....logging_config import get_logger

logger = get_logger(__name__)

SnippetStrategy = Callable[
    ["PhpSnippetGenerator", FieldDescriptor, str, int, FrozenSet[str]], str
]


class PhpSnippetGenerator(CodeGenerator):
    """Code generator for ProcessWire template-file snippets."""

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "php"

    @property
    def file_extension(self) -> str:
        """Return PHP file extension."""
        return ".php"

    def get_template_directory(self) -> Path:
        """Return the PHP snippet templates directory."""
        return Path(__file__).parent / "templates"

    def generate(
        self, template: Optional[TemplateDescriptor], selected_field_names: Iterable[Any]
    ) -> str:
        """
        Generate PHP code for the selected fields of a template.

        Fields are emitted in selection order. Names the template does not
        have are dropped; ``title`` is always honored. An unresolved template
        or an empty selection yields an empty string.
        """
        if template is None:
            logger.debug("No template given, nothing to generate")
            return ""

        resolved = self.resolve_selection(template, selected_field_names)
        if not resolved:
            logger.debug("Empty selection for template %s", template.name)
            return ""

        page_var = self.scope_var(0)

        parts = [self.render_template("file_header.php.j2", {"template_name": template.name})]

        for name, field in resolved:
            if field is None or name == TITLE_FIELD:
                heading = TITLE_FIELD
                body = self.render_template("title.php.j2", {"page_var": page_var})
            else:
                heading = self._heading(field)
                body = self.generate_field(field, page_var)

            parts.append(
                self.render_template(
                    "field_block.php.j2",
                    {"heading": heading, "body": body, "name": name},
                )
            )
            logger.debug("Generated block for %s.%s", template.name, name)

        logger.info(
            "Generated %d field block(s) for template %s", len(resolved), template.name
        )
        return "".join(parts)

    def generate_field(
        self,
        field: FieldDescriptor,
        page_var: str,
        depth: int = 0,
        expanding: FrozenSet[str] = frozenset(),
    ) -> str:
        """Generate the snippet for one field by dispatching on its kind."""
        strategy = SNIPPET_STRATEGIES.get(field.kind, PhpSnippetGenerator._generic_snippet)
        return strategy(self, field, page_var, depth, expanding)

    def scope_var(self, depth: int) -> str:
        """
        Variable name holding the current record at a nesting depth.

        Depth 0 is the page itself; repeater items use ``$item``, ``$item2``...
        """
        if depth <= 0:
            return self.config.page_var
        if depth == 1:
            return self.config.item_var
        return f"{self.config.item_var}{depth}"

    # Snippet strategies

    def _text_snippet(
        self, field: FieldDescriptor, page_var: str, depth: int, expanding: FrozenSet[str]
    ) -> str:
        if is_rich_text(field):
            return self.render_template(
                "text_html.php.j2",
                {
                    "page_var": page_var,
                    "name": field.name,
                    "purifier_module": get_sanitizer().field_name(self.config.purifier_module),
                },
            )
        return self.render_template("text.php.j2", {"page_var": page_var, "name": field.name})

    def _image_snippet(
        self, field: FieldDescriptor, page_var: str, depth: int, expanding: FrozenSet[str]
    ) -> str:
        template_name = "image_multi.php.j2" if field.multi_valued else "image_single.php.j2"
        return self.render_template(
            template_name,
            {
                "page_var": page_var,
                "name": field.name,
                "width": int(self.config.image_width),
                "height": int(self.config.image_height),
            },
        )

    def _page_snippet(
        self, field: FieldDescriptor, page_var: str, depth: int, expanding: FrozenSet[str]
    ) -> str:
        if field.multi_valued:
            return self.render_template(
                "page_multi.php.j2",
                {"page_var": page_var, "name": field.name, "loop_var": self.scope_var(depth + 1)},
            )
        return self.render_template("page_single.php.j2", {"page_var": page_var, "name": field.name})

    def _repeater_snippet(
        self, field: FieldDescriptor, page_var: str, depth: int, expanding: FrozenSet[str]
    ) -> str:
        item_var = self.scope_var(depth + 1)
        subfield_code = ""

        repeater_template = self.resolve_template(field.repeater_template)
        if repeater_template is not None and repeater_template.name in expanding:
            logger.warning(
                "Repeater %s refers back to %s, not expanding again",
                field.name,
                repeater_template.name,
            )
            repeater_template = None

        if repeater_template is not None and repeater_template.fields:
            # Templates on the current expansion path; a repeat is a cycle
            inner = expanding | {repeater_template.name}
            subfield_code = "".join(
                self._subfield_block(subfield, item_var, depth + 1, inner)
                for subfield in repeater_template.fields
            )

        if not subfield_code:
            subfield_code = indent_code("// Add your repeater item fields here\n", self.config.indent_size)

        return self.render_template(
            "repeater.php.j2",
            {
                "page_var": page_var,
                "name": field.name,
                "loop_var": item_var,
                "subfield_code": subfield_code,
            },
        )

    def _subfield_block(
        self, subfield: FieldDescriptor, item_var: str, depth: int, expanding: FrozenSet[str]
    ) -> str:
        body = self.generate_field(subfield, item_var, depth, expanding)
        return self.render_template(
            "repeater_subfield.php.j2",
            {
                "indent": " " * self.config.indent_size,
                "heading": self._heading(subfield),
                "body": indent_code(body, self.config.indent_size),
            },
        )

    def _options_snippet(
        self, field: FieldDescriptor, page_var: str, depth: int, expanding: FrozenSet[str]
    ) -> str:
        return self.render_template("options.php.j2", {"page_var": page_var, "name": field.name})

    def _datetime_snippet(
        self, field: FieldDescriptor, page_var: str, depth: int, expanding: FrozenSet[str]
    ) -> str:
        return self.render_template(
            "datetime.php.j2",
            {
                "page_var": page_var,
                "name": field.name,
                "date_format": php_single_quoted(self.config.date_format),
            },
        )

    def _url_snippet(
        self, field: FieldDescriptor, page_var: str, depth: int, expanding: FrozenSet[str]
    ) -> str:
        return self.render_template("url.php.j2", {"page_var": page_var, "name": field.name})

    def _email_snippet(
        self, field: FieldDescriptor, page_var: str, depth: int, expanding: FrozenSet[str]
    ) -> str:
        return self.render_template("email.php.j2", {"page_var": page_var, "name": field.name})

    def _integer_snippet(
        self, field: FieldDescriptor, page_var: str, depth: int, expanding: FrozenSet[str]
    ) -> str:
        return self.render_template("integer.php.j2", {"page_var": page_var, "name": field.name})

    def _float_snippet(
        self, field: FieldDescriptor, page_var: str, depth: int, expanding: FrozenSet[str]
    ) -> str:
        return self.render_template("float.php.j2", {"page_var": page_var, "name": field.name})

    def _checkbox_snippet(
        self, field: FieldDescriptor, page_var: str, depth: int, expanding: FrozenSet[str]
    ) -> str:
        return self.render_template("checkbox.php.j2", {"page_var": page_var, "name": field.name})

    def _generic_snippet(
        self, field: FieldDescriptor, page_var: str, depth: int, expanding: FrozenSet[str]
    ) -> str:
        return self.render_template("generic.php.j2", {"page_var": page_var, "name": field.name})

    def _heading(self, field: FieldDescriptor) -> str:
        """Block heading: field name plus its label."""
        if not self.config.add_comments:
            return field.name
        return f"{field.name} ({normalize_comment(field.display_label)})"


# Kind -> snippet strategy; UNKNOWN is the single fallback
SNIPPET_STRATEGIES: Dict[FieldKind, SnippetStrategy] = {
    FieldKind.TEXT: PhpSnippetGenerator._text_snippet,
    FieldKind.TEXTAREA: PhpSnippetGenerator._text_snippet,
    FieldKind.PAGE_TITLE: PhpSnippetGenerator._text_snippet,
    FieldKind.IMAGE: PhpSnippetGenerator._image_snippet,
    FieldKind.PAGE: PhpSnippetGenerator._page_snippet,
    FieldKind.REPEATER: PhpSnippetGenerator._repeater_snippet,
    FieldKind.OPTIONS: PhpSnippetGenerator._options_snippet,
    FieldKind.DATETIME: PhpSnippetGenerator._datetime_snippet,
    FieldKind.URL: PhpSnippetGenerator._url_snippet,
    FieldKind.EMAIL: PhpSnippetGenerator._email_snippet,
    FieldKind.INTEGER: PhpSnippetGenerator._integer_snippet,
    FieldKind.FLOAT: PhpSnippetGenerator._float_snippet,
    FieldKind.CHECKBOX: PhpSnippetGenerator._checkbox_snippet,
    FieldKind.UNKNOWN: PhpSnippetGenerator._generic_snippet,
}


def php_single_quoted(value: Any) -> str:
    """Escape text for use inside a single-quoted PHP string."""
    return str(value).replace("\\", "\\\\").replace("'", "\\'")


# Factory functions
def create_php_generator(
    config: Optional[GeneratorConfig] = None, schema=None
) -> PhpSnippetGenerator:
    """Create a PHP snippet generator."""
    return PhpSnippetGenerator(config, schema)


def generate_snippets(
    template: Optional[TemplateDescriptor],
    selected_field_names: Iterable[Any],
    schema=None,
    config: Optional[GeneratorConfig] = None,
) -> str:
    """Generate PHP code for a template's selected fields."""
    return create_php_generator(config, schema).generate(template, selected_field_names)

