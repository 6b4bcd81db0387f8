"""Unit tests for loader.py module.

Tests package resolution, config file discovery and parsing, and
default-export normalization against real files in temporary directories.
"""

import json
import sys
from pathlib import Path
from types import ModuleType

import pytest

from sitecompose.exceptions import ConfigError, ConfigLoadError
from sitecompose.loader import (
    ConfigFileLoader,
    PackageResolver,
    load_site_config,
    normalize_default_export,
)


class TestPackageResolver:
    """Test cases for PackageResolver."""

    def test_search_path_directory(self, tmp_path):
        (tmp_path / "theme-a").mkdir()

        resolver = PackageResolver([tmp_path])

        assert resolver("theme-a") == (tmp_path / "theme-a").resolve()

    def test_search_paths_checked_in_order(self, tmp_path):
        first = tmp_path / "first"
        second = tmp_path / "second"
        (first / "theme-a").mkdir(parents=True)
        (second / "theme-a").mkdir(parents=True)

        resolver = PackageResolver([first, second])

        assert resolver.resolve("theme-a") == (first / "theme-a").resolve()

    def test_scoped_name_in_search_path(self, tmp_path):
        (tmp_path / "@scope" / "theme").mkdir(parents=True)

        assert PackageResolver([tmp_path]).resolve("@scope/theme") == (tmp_path / "@scope" / "theme").resolve()

    def test_blank_name_is_not_the_search_root(self, tmp_path):
        with pytest.raises(ModuleNotFoundError):
            PackageResolver([tmp_path]).resolve("")

    def test_missing_theme_raises_module_not_found(self, tmp_path):
        with pytest.raises(ModuleNotFoundError):
            PackageResolver([tmp_path]).resolve("sitecompose-no-such-theme")

    def test_invalid_module_name_raises_module_not_found(self):
        with pytest.raises(ModuleNotFoundError):
            PackageResolver().resolve("@scope/not-installed")

    def test_missing_parent_package_raises_module_not_found(self):
        with pytest.raises(ModuleNotFoundError):
            PackageResolver().resolve("sitecompose_missing_parent.child")

    def test_importable_package(self, tmp_path, monkeypatch):
        package_dir = tmp_path / "site_theme_pkg"
        package_dir.mkdir()
        (package_dir / "__init__.py").write_text("")
        monkeypatch.syspath_prepend(str(tmp_path))

        resolved = PackageResolver().resolve("site-theme-pkg")

        assert resolved == package_dir.resolve()

    def test_importable_single_module(self, tmp_path, monkeypatch):
        (tmp_path / "site_theme_module.py").write_text("")
        monkeypatch.syspath_prepend(str(tmp_path))

        assert PackageResolver().resolve("site_theme_module") == tmp_path.resolve()


class TestConfigFileLoader:
    """Test cases for ConfigFileLoader."""

    @pytest.fixture
    def loader(self):
        """Create a ConfigFileLoader instance."""
        return ConfigFileLoader()

    def test_missing_file_returns_none(self, loader, tmp_path):
        assert loader.load(tmp_path) is None

    def test_yaml(self, loader, tmp_path):
        (tmp_path / "site_config.yaml").write_text("plugins:\n  - theme-b\npathPrefix: /docs\n")

        assert loader.load(tmp_path) == {"plugins": ["theme-b"], "pathPrefix": "/docs"}

    def test_yml(self, loader, tmp_path):
        (tmp_path / "site_config.yml").write_text("title: yml\n")

        assert loader.load(tmp_path) == {"title": "yml"}

    def test_json(self, loader, tmp_path):
        (tmp_path / "site_config.json").write_text(json.dumps({"plugins": [{"resolve": "x"}]}))

        assert loader.load(tmp_path) == {"plugins": [{"resolve": "x"}]}

    def test_toml(self, loader, tmp_path):
        (tmp_path / "site_config.toml").write_text('pathPrefix = "/docs"\nplugins = ["theme-b"]\n')

        assert loader.load(tmp_path) == {"pathPrefix": "/docs", "plugins": ["theme-b"]}

    def test_python_module(self, loader, tmp_path):
        (tmp_path / "site_config.py").write_text(
            "def config(options):\n"
            "    return {'basePath': options.get('basePath', '/')}\n"
        )

        module = loader.load(tmp_path)

        assert isinstance(module, ModuleType)
        assert module.config({"basePath": "/docs"}) == {"basePath": "/docs"}

    def test_python_file_preferred_over_yaml(self, loader, tmp_path):
        (tmp_path / "site_config.py").write_text("config = {'from': 'py'}\n")
        (tmp_path / "site_config.yaml").write_text("from: yaml\n")

        assert loader.find(tmp_path) == tmp_path / "site_config.py"

    def test_custom_stem(self, loader, tmp_path):
        (tmp_path / "theme.json").write_text("{}")

        assert loader.load(tmp_path, "theme") == {}
        assert loader.load(tmp_path) is None

    def test_invalid_yaml(self, loader, tmp_path):
        (tmp_path / "site_config.yaml").write_text("plugins: [unclosed\n")

        with pytest.raises(ConfigLoadError) as exc_info:
            loader.load(tmp_path)

        assert exc_info.value.file_path == tmp_path / "site_config.yaml"

    def test_invalid_json(self, loader, tmp_path):
        (tmp_path / "site_config.json").write_text("{not json")

        with pytest.raises(ConfigLoadError):
            loader.load(tmp_path)

    def test_invalid_toml(self, loader, tmp_path):
        (tmp_path / "site_config.toml").write_text("= broken")

        with pytest.raises(ConfigLoadError):
            loader.load(tmp_path)

    def test_failing_python_module(self, loader, tmp_path):
        (tmp_path / "site_config.py").write_text("raise ValueError('bad theme')\n")

        with pytest.raises(ConfigLoadError, match="bad theme"):
            loader.load(tmp_path)

    def test_python_module_not_left_in_sys_modules(self, loader, tmp_path):
        (tmp_path / "site_config.py").write_text("config = {}\n")
        before = set(sys.modules)

        loader.load(tmp_path)

        assert set(sys.modules) == before

    def test_python_module_with_dataclass(self, loader, tmp_path):
        (tmp_path / "site_config.py").write_text(
            "from dataclasses import dataclass, asdict\n"
            "\n"
            "@dataclass\n"
            "class Meta:\n"
            "    title: str = 'Docs'\n"
            "\n"
            "config = {'siteMetadata': asdict(Meta())}\n"
        )
        before = set(sys.modules)

        module = loader.load(tmp_path)

        assert module.config == {"siteMetadata": {"title": "Docs"}}
        assert set(sys.modules) == before


class TestNormalizeDefaultExport:
    """Test cases for normalize_default_export."""

    def test_module_default(self):
        module = ModuleType("m")
        module.default = {"a": 1}
        assert normalize_default_export(module) == {"a": 1}

    def test_module_config(self):
        module = ModuleType("m")
        module.config = {"b": 2}
        assert normalize_default_export(module) == {"b": 2}

    def test_module_without_exports(self):
        assert normalize_default_export(ModuleType("m")) is None

    def test_other_values_unchanged(self):
        value = {"default": {"a": 1}}
        assert normalize_default_export(value) is value
        assert normalize_default_export(None) is None


class TestLoadSiteConfig:
    """Test cases for load_site_config."""

    def test_loads_mapping(self, tmp_path):
        (tmp_path / "site_config.yaml").write_text("plugins:\n  - theme-a\n")

        assert load_site_config(tmp_path) == {"plugins": ["theme-a"]}

    def test_missing_file_gives_empty_config(self, tmp_path):
        assert load_site_config(tmp_path) == {}

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_site_config(tmp_path / "nope")

    def test_python_site_config(self, tmp_path):
        (tmp_path / "site_config.py").write_text("config = {'pathPrefix': '/blog'}\n")

        assert load_site_config(tmp_path) == {"pathPrefix": "/blog"}

    def test_non_mapping(self, tmp_path):
        (tmp_path / "site_config.json").write_text("[1, 2]")

        with pytest.raises(ConfigError, match="must be a mapping"):
            load_site_config(tmp_path)
