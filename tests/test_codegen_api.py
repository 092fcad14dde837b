"""Tests for generation results, configuration and the generator registry."""

import json

import pytest

from pw_studio import codegen
from pw_studio.codegen import (
    ConfigError,
    GeneratorConfig,
    GeneratorError,
    GeneratorRegistry,
    RegistryError,
    generate_code,
    get_generator,
    list_supported_languages,
)
from pw_studio.codegen.core.config import ConfigManager, load_config
from pw_studio.codegen.core.templates import TemplateError, create_template_engine
from pw_studio.codegen.languages.php import PhpSnippetGenerator


class FailingGenerator(PhpSnippetGenerator):
    def generate(self, template, selected_field_names):
        raise GeneratorError("boom")


class TestGenerateCode:
    def test_metadata_lists_emitted_fields(self, generator, blog_post):
        result = generate_code(generator, blog_post, ["title", "views", "ghost"])
        assert result.success is True
        assert result.metadata["language"] == "php"
        assert result.metadata["file_extension"] == ".php"
        assert result.metadata["template"] == "blog-post"
        assert result.metadata["fields"] == ["title", "views"]
        assert result.metadata["field_count"] == 2
        assert result.metadata["generic_fields"] == []

    def test_metadata_lists_generic_fallbacks(self, generator, blog_post):
        result = generate_code(generator, blog_post, ["rating", "views"])
        assert result.metadata["generic_fields"] == ["rating"]

    def test_warnings_cover_generic_fallbacks_only(self, generator, blog_post):
        """Unsupported types are reported; dropped selections are not."""
        result = generate_code(generator, blog_post, ["rating", "ghost"])
        assert len(result.warnings) == 1
        assert "FieldtypeStars" in result.warnings[0]
        assert not any("ghost" in w for w in result.warnings)

    def test_unresolvable_repeater_warning(self, blog_post):
        result = generate_code(PhpSnippetGenerator(), blog_post, ["gallery"])
        assert any("gallery" in w for w in result.warnings)

    def test_empty_result_is_still_success(self, generator):
        result = generate_code(generator, None, ["title"])
        assert result.success is True
        assert result.code == ""
        assert result.metadata["field_count"] == 0
        assert result.to_response() == {"success": True, "code": ""}

    def test_failure_becomes_error_result(self, snapshot, blog_post):
        result = generate_code(FailingGenerator(schema=snapshot), blog_post, ["title"])
        assert result.success is False
        assert "boom" in result.error_message
        assert isinstance(result.exception, GeneratorError)
        assert result.to_response()["success"] is False


class TestConvenienceApi:
    def test_generate_by_name_and_id(self, snapshot):
        by_name = codegen.generate(snapshot, "blog-post", ["views"])
        assert by_name
        assert codegen.generate(snapshot, 11, ["views"]) == by_name
        assert codegen.generate(snapshot, "11", ["views"]) == by_name

    def test_unknown_template_gives_empty_string(self, snapshot):
        assert codegen.generate(snapshot, 999, ["title"]) == ""

    def test_generate_result_unknown_language(self, snapshot):
        result = codegen.generate_result(snapshot, "blog-post", ["title"], language="cobol")
        assert result.success is False


class TestRegistry:
    def test_php_is_registered(self):
        assert list_supported_languages() == ["php"]

    def test_aliases(self, snapshot):
        generator = get_generator("ProcessWire", schema=snapshot)
        assert isinstance(generator, PhpSnippetGenerator)
        assert generator.schema is snapshot

    def test_unknown_language(self):
        with pytest.raises(RegistryError):
            get_generator("cobol")

    def test_dict_config(self):
        generator = get_generator("php", {"page_var": "$p", "theme": "dark"})
        assert generator.config.page_var == "$p"
        assert generator.config.custom == {"theme": "dark"}

    def test_aliases_resolve_to_primary_name(self):
        registry = GeneratorRegistry()
        registry.register("php", PhpSnippetGenerator, aliases=["ProcessWire", "pw"])
        assert registry.resolve("PW") == "php"
        assert registry.resolve("processwire") == "php"
        assert registry.list_languages() == ["php"]

    def test_invalid_config_type(self):
        with pytest.raises(RegistryError):
            get_generator("php", 42)


class TestConfigManager:
    def test_defaults(self):
        config = load_config()
        assert config.page_var == "$page"
        assert config.item_var == "$item"
        assert (config.image_width, config.image_height) == (800, 600)
        assert config.date_format == "F j, Y"
        assert config.purifier_module == "MarkupHTMLPurifier"

    def test_file_then_overrides(self, tmp_path):
        path = tmp_path / "gen.json"
        path.write_text(json.dumps({"indent_size": 2, "image_width": 1024}), encoding="utf-8")
        config = load_config("php", custom_config={"image_width": 640}, config_file=path)
        assert config.indent_size == 2
        assert config.image_width == 640

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(config_file=tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(config_file=path)

    def test_save_round_trip(self, tmp_path):
        manager = ConfigManager()
        path = tmp_path / "out.json"
        manager.save_config(GeneratorConfig(item_var="$row", custom={"x": 1}), path)
        saved = json.loads(path.read_text(encoding="utf-8"))
        assert saved["item_var"] == "$row"
        assert saved["x"] == 1
        assert manager.get_config("php", config_file=path).item_var == "$row"

    def test_validate_config(self):
        manager = ConfigManager()
        assert manager.validate_config(GeneratorConfig()) == []
        warnings = manager.validate_config(
            GeneratorConfig(page_var="page", item_var="page", image_width=0)
        )
        assert any("page_var" in w for w in warnings)
        assert any("image_width" in w for w in warnings)

    def test_list_languages(self):
        assert ConfigManager().list_languages() == ["php"]

    def test_config_file_must_be_json(self, tmp_path):
        path = tmp_path / "gen.yaml"
        path.write_text("page_var: $p", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(config_file=path)


class TestTemplateEngine:
    def test_missing_snippet_template(self, tmp_path):
        engine = create_template_engine(tmp_path)
        with pytest.raises(TemplateError):
            engine.render_template("nope.php.j2", {})

    def test_undefined_variables_fail(self, tmp_path):
        """Snippet templates may not silently render missing context."""
        (tmp_path / "x.php.j2").write_text("{{ page_var }}->{{ name }}\n", encoding="utf-8")
        engine = create_template_engine(tmp_path)
        assert engine.render_template("x.php.j2", {"page_var": "$page", "name": "a"}) == "$page->a\n"
        with pytest.raises(TemplateError):
            engine.render_template("x.php.j2", {"page_var": "$page"})
