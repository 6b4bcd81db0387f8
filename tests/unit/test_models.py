"""Unit tests for the models package.

Tests declaration parsing, resolved theme helpers and site config
validation.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from sitecompose.exceptions import ConfigValidationError, MalformedDeclarationError
from sitecompose.models import (
    CompositionMode,
    ResolvedTheme,
    ThemeDeclaration,
    parse_declaration,
    declaration_name,
    declaration_options,
    validate_site_config,
)


class TestParseDeclaration:
    """Test cases for parse_declaration."""

    def test_string_declaration(self):
        assert parse_declaration("theme-a") == "theme-a"

    def test_record_declaration(self):
        declaration = parse_declaration({"resolve": "theme-a", "options": {"x": 1}})

        assert isinstance(declaration, ThemeDeclaration)
        assert declaration.resolve == "theme-a"
        assert declaration.options == {"x": 1}

    def test_record_without_options(self):
        declaration = parse_declaration({"resolve": "theme-a"})
        assert declaration.options == {}

    def test_record_extra_keys_are_kept(self):
        declaration = parse_declaration({"resolve": "theme-a", "label": "main"})
        assert declaration.model_dump()["label"] == "main"

    def test_existing_declaration_passes_through(self):
        declaration = ThemeDeclaration(resolve="theme-a")
        assert parse_declaration(declaration) is declaration

    @pytest.mark.parametrize("raw", [42, None, ["theme-a"], {"options": {}}, {"resolve": ""}, ""])
    def test_malformed_declarations(self, raw):
        with pytest.raises(MalformedDeclarationError):
            parse_declaration(raw, index=3, list_key="plugins")

    def test_error_names_position(self):
        with pytest.raises(MalformedDeclarationError) as exc_info:
            parse_declaration(42, index=3, list_key="plugins")

        assert "plugins[3]" in str(exc_info.value)
        assert exc_info.value.index == 3
        assert exc_info.value.list_key == "plugins"
        assert exc_info.value.declaration == 42

    def test_options_must_be_mapping(self):
        with pytest.raises(MalformedDeclarationError, match="must be a mapping"):
            parse_declaration({"resolve": "theme-a", "options": ["x"]}, index=0)

    def test_option_keys_must_be_strings(self):
        raw = {"resolve": "theme-a", "options": {1: "a"}}

        with pytest.raises(MalformedDeclarationError) as exc_info:
            parse_declaration(raw, index=2, list_key="plugins")

        assert "plugins[2]" in str(exc_info.value)
        assert exc_info.value.index == 2
        assert exc_info.value.declaration == raw

    def test_record_keys_must_be_strings(self):
        with pytest.raises(MalformedDeclarationError) as exc_info:
            parse_declaration({"resolve": "theme-a", 7: "x"}, index=0)

        assert exc_info.value.index == 0

    def test_declaration_helpers(self):
        record = ThemeDeclaration(resolve="theme-b", options={"y": 2})

        assert declaration_name("theme-a") == "theme-a"
        assert declaration_name(record) == "theme-b"
        assert declaration_options("theme-a") == {}
        assert declaration_options(record) == {"y": 2}

    def test_blank_resolve_rejected_by_model(self):
        with pytest.raises(ValidationError):
            ThemeDeclaration(resolve="  ")


class TestResolvedTheme:
    """Test cases for ResolvedTheme."""

    def test_partial_theme(self):
        theme = ResolvedTheme(theme_name="local-plugin", theme_declaration="local-plugin")

        assert theme.theme_config is None
        assert theme.theme_directory is None
        assert theme.identity == "local-plugin"
        assert theme.options == {}

    def test_identity_uses_directory(self):
        theme = ResolvedTheme(
            theme_name="theme-a",
            theme_config={},
            theme_declaration="theme-a",
            theme_directory=Path("/themes/theme-a"),
        )
        assert theme.identity == str(Path("/themes/theme-a"))

    def test_plugin_entry_carries_options(self):
        theme = ResolvedTheme(
            theme_name="theme-a",
            theme_declaration=ThemeDeclaration(resolve="theme-a", options={"x": 1}),
        )
        assert theme.plugin_entry().model_dump() == {"resolve": "theme-a", "options": {"x": 1}}

    def test_resolved_theme_is_frozen(self):
        theme = ResolvedTheme(theme_name="a", theme_declaration="a")
        with pytest.raises(ValidationError):
            theme.theme_name = "b"


class TestCompositionMode:
    """Test cases for CompositionMode."""

    def test_current_mode_reads_plugins(self):
        assert CompositionMode().themes_key == "plugins"

    def test_legacy_mode_reads_experimental_themes(self):
        assert CompositionMode(use_legacy_themes=True).themes_key == "__experimentalThemes"


class TestValidateSiteConfig:
    """Test cases for validate_site_config."""

    def test_defaults_are_applied(self):
        config = validate_site_config({})

        assert config["pathPrefix"] == ""
        assert config["polyfill"] is True
        assert config["plugins"] == []
        assert "siteMetadata" not in config

    @pytest.mark.parametrize(
        "prefix, expected",
        [("blog", "/blog"), ("/blog/", "/blog"), ("blog/", "/blog"), ("/blog", "/blog")],
    )
    def test_path_prefix_normalization(self, prefix, expected):
        assert validate_site_config({"pathPrefix": prefix})["pathPrefix"] == expected

    def test_polyfill_respected(self):
        assert validate_site_config({"polyfill": False})["polyfill"] is False

    def test_unknown_keys_pass_through(self):
        config = validate_site_config({"__experimentalThemes": ["t"], "custom": {"a": 1}})

        assert config["__experimentalThemes"] == ["t"]
        assert config["custom"] == {"a": 1}

    def test_input_not_mutated(self):
        original = {"pathPrefix": "blog/"}
        validate_site_config(original)
        assert original == {"pathPrefix": "blog/"}

    def test_link_prefix_rejected_with_hint(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            validate_site_config({"linkPrefix": "/blog"})

        assert "pathPrefix" in exc_info.value.hint

    def test_invalid_plugin_entry(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            validate_site_config({"plugins": [{"options": {}}]})

        assert any("resolve" in error for error in exc_info.value.errors)

    def test_invalid_site_metadata(self):
        with pytest.raises(ConfigValidationError):
            validate_site_config({"siteMetadata": "not a mapping"})
