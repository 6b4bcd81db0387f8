"""Package resolution and config file loading.

These are the default collaborators used by the theme resolver: finding the
directory a theme package lives in, reading the config file inside it, and
unwrapping the value a Python config module exports.
"""

import hashlib
import importlib.util
import json
import logging
import re
import sys
import tomllib
from pathlib import Path
from types import ModuleType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import yaml

from .exceptions import ConfigError, ConfigLoadError

logger = logging.getLogger(__name__)

CONFIG_FILE_STEM = "site_config"
CONFIG_FILE_EXTENSIONS = (".py", ".yaml", ".yml", ".json", ".toml")

_MODULE_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


class PackageResolver:
    """Resolves theme names to package directories.

    Directories named after the theme inside the configured search paths are
    checked first, in order. After that the name is looked up as an
    importable Python package, with dashes mapped to underscores.
    """

    def __init__(self, search_paths: Optional[Sequence[Union[str, Path]]] = None) -> None:
        """Initialize the resolver.

        Args:
            search_paths: Directories that hold theme packages
        """
        self.search_paths: List[Path] = [Path(p) for p in search_paths or []]

    def __call__(self, name: str) -> Path:
        return self.resolve(name)

    def resolve(self, name: str) -> Path:
        """Find the directory of a theme package.

        Args:
            name: Theme package name

        Returns:
            Absolute path of the package directory

        Raises:
            ModuleNotFoundError: If no package with that name exists
        """
        if not name or not name.strip():
            raise ModuleNotFoundError("Theme name is empty", name=name)

        for root in self.search_paths:
            candidate = root / name
            if candidate.is_dir():
                return candidate.resolve()

        module_name = name.replace("-", "_")
        if not _MODULE_NAME_RE.match(module_name):
            raise ModuleNotFoundError(f"No theme package named '{name}'", name=name)

        try:
            spec = importlib.util.find_spec(module_name)
        except ModuleNotFoundError as e:
            raise ModuleNotFoundError(f"No theme package named '{name}'", name=name) from e

        if spec is None:
            raise ModuleNotFoundError(f"No theme package named '{name}'", name=name)

        if spec.submodule_search_locations:
            return Path(list(spec.submodule_search_locations)[0]).resolve()
        if spec.origin and spec.has_location:
            return Path(spec.origin).resolve().parent

        raise ModuleNotFoundError(f"Theme '{name}' is not a file-based package", name=name)


class ConfigFileLoader:
    """Loads ``<stem>.py|.yaml|.yml|.json|.toml`` from a directory."""

    def __init__(self, extensions: Sequence[str] = CONFIG_FILE_EXTENSIONS) -> None:
        self.extensions = tuple(extensions)

    def __call__(self, directory: Union[str, Path], stem: str = CONFIG_FILE_STEM) -> Any:
        return self.load(directory, stem)

    def find(self, directory: Union[str, Path], stem: str = CONFIG_FILE_STEM) -> Optional[Path]:
        """Return the first existing config file, or None."""
        for ext in self.extensions:
            path = Path(directory) / f"{stem}{ext}"
            if path.is_file():
                return path
        return None

    def load(self, directory: Union[str, Path], stem: str = CONFIG_FILE_STEM) -> Any:
        """Load the raw config value found in a directory.

        Args:
            directory: Directory to look in
            stem: File name without extension

        Returns:
            Parsed file contents, an executed module for Python files, or
            None when there is no config file

        Raises:
            ConfigLoadError: If the file cannot be read, parsed or executed
        """
        path = self.find(directory, stem)
        if path is None:
            logger.debug("No %s config file in %s", stem, directory)
            return None

        logger.debug("Loading config file %s", path)
        suffix = path.suffix.lower()
        if suffix == ".py":
            return self._load_module(path)

        try:
            if suffix in (".yaml", ".yml"):
                with open(path, "r", encoding="utf-8") as f:
                    return yaml.safe_load(f)
            if suffix == ".json":
                with open(path, "r", encoding="utf-8") as f:
                    return json.load(f)
            if suffix == ".toml":
                with open(path, "rb") as f:
                    return tomllib.load(f)
        except (OSError, yaml.YAMLError, json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
            raise ConfigLoadError(f"Failed to load config file {path}: {e}", file_path=path) from e

        raise ConfigLoadError(f"Unsupported config file type: {path}", file_path=path)

    def _load_module(self, path: Path) -> ModuleType:
        digest = hashlib.sha1(str(path.resolve()).encode("utf-8")).hexdigest()[:12]
        spec = importlib.util.spec_from_file_location(f"_sitecompose_config_{digest}", path)
        if spec is None or spec.loader is None:
            raise ConfigLoadError(f"Cannot import config module {path}", file_path=path)

        module = importlib.util.module_from_spec(spec)
        # the module must be importable by name while its body runs
        sys.modules[spec.name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            raise ConfigLoadError(f"Failed to execute config module {path}: {e}", file_path=path) from e
        finally:
            sys.modules.pop(spec.name, None)
        return module


def normalize_default_export(value: Any) -> Any:
    """Unwrap the value a config module exports.

    Modules export ``default`` if they define it, otherwise ``config``.
    Any other value is returned unchanged.
    """
    if isinstance(value, ModuleType):
        if hasattr(value, "default"):
            return value.default
        return getattr(value, "config", None)
    return value


def load_site_config(
    site_dir: Union[str, Path],
    stem: str = CONFIG_FILE_STEM,
    loader: Optional[ConfigFileLoader] = None,
) -> Dict[str, Any]:
    """Load a site's own configuration.

    Args:
        site_dir: Site root directory
        stem: Config file name without extension
        loader: Config file loader to use

    Returns:
        The site configuration; empty when the site has no config file

    Raises:
        ConfigError: If the site directory is missing or the config is not a mapping
    """
    site_dir = Path(site_dir)
    if not site_dir.is_dir():
        raise ConfigError(f"Site directory not found: {site_dir}")

    loader = loader or ConfigFileLoader()
    value = normalize_default_export(loader.load(site_dir, stem))
    if value is None:
        logger.debug("Site %s has no config file, using an empty config", site_dir)
        return {}
    if not isinstance(value, Mapping):
        raise ConfigError(
            f"Site config in {site_dir} must be a mapping, got {type(value).__name__}"
        )
    return dict(value)
