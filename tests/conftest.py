"""Shared fixtures for sitecompose tests."""

from pathlib import Path
from typing import Any, Dict, List, Tuple

import pytest

from sitecompose.resolver import ThemeResolver

NO_CONFIG = object()


class FakeThemes:
    """In-memory stand-in for package resolution and config loading.

    Themes registered with a config resolve to ``/themes/<name>``; themes
    registered with NO_CONFIG resolve but have no config file; anything
    else is not an installed package.
    """

    def __init__(self) -> None:
        self.configs: Dict[str, Any] = {}
        self.calls: List[Tuple[str, str]] = []

    def add(self, name: str, config: Any = NO_CONFIG) -> None:
        self.configs[name] = config

    def package_resolve(self, name: str) -> Path:
        self.calls.append(("resolve", name))
        if name not in self.configs:
            raise ModuleNotFoundError(f"No module named '{name}'")
        return Path("/themes") / name

    def load_config_file(self, directory: Path, stem: str) -> Any:
        self.calls.append(("load", directory.name))
        config = self.configs[directory.name]
        return None if config is NO_CONFIG else config

    def resolved_names(self) -> List[str]:
        return [name for kind, name in self.calls if kind == "resolve"]

    def resolver(self) -> ThemeResolver:
        return ThemeResolver(
            package_resolve=self.package_resolve,
            load_config_file=self.load_config_file,
        )


@pytest.fixture
def fake_themes():
    """Create an empty fake theme registry."""
    return FakeThemes()
