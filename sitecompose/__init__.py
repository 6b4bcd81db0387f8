"""sitecompose package.

Composes a site configuration from recursively resolved themes: packages
that ship their own configuration and may declare parent themes.
"""

__version__ = "0.1.0"
__description__ = "Compose site configurations from recursively resolved themes"

# Re-export main classes for convenience
from .composer import compose_themes, compose_themes_sync, inject_theme
from .ancestry import process_theme
from .resolver import ThemeResolver, resolve_theme
from .merge import merge_configs
from .loader import ConfigFileLoader, PackageResolver, load_site_config, normalize_default_export
from .config import ConfigManager, Settings
from .models import (
    CompositionMode,
    CompositionResult,
    PluginEntry,
    ResolvedTheme,
    ThemeDeclaration,
    validate_site_config,
)
from .exceptions import (
    SiteComposeError,
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
    MalformedDeclarationError,
    CyclicThemeError,
)

__all__ = [
    "__version__",
    "__description__",
    "compose_themes",
    "compose_themes_sync",
    "inject_theme",
    "process_theme",
    "ThemeResolver",
    "resolve_theme",
    "merge_configs",
    "ConfigFileLoader",
    "PackageResolver",
    "load_site_config",
    "normalize_default_export",
    "ConfigManager",
    "Settings",
    "CompositionMode",
    "CompositionResult",
    "PluginEntry",
    "ResolvedTheme",
    "ThemeDeclaration",
    "validate_site_config",
    "SiteComposeError",
    "ConfigError",
    "ConfigLoadError",
    "ConfigValidationError",
    "MalformedDeclarationError",
    "CyclicThemeError",
]
