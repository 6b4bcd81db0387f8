"""Data models for sitecompose.

This package contains Pydantic models for theme declarations, resolved
themes, composition results and the validated site configuration.
"""

from .theme import (
    PLUGINS_KEY,
    LEGACY_THEMES_KEY,
    ThemeDeclaration,
    Declaration,
    PluginEntry,
    ResolvedTheme,
    ThemeChain,
    CompositionMode,
    CompositionResult,
    parse_declaration,
    declaration_name,
    declaration_options,
)
from .site import SiteConfig, validate_site_config

__all__ = [
    "PLUGINS_KEY",
    "LEGACY_THEMES_KEY",
    "ThemeDeclaration",
    "Declaration",
    "PluginEntry",
    "ResolvedTheme",
    "ThemeChain",
    "CompositionMode",
    "CompositionResult",
    "parse_declaration",
    "declaration_name",
    "declaration_options",
    "SiteConfig",
    "validate_site_config",
]
