"""Composition of a site configuration from its themes.

Every theme the site declares is resolved together with its ancestry, the
chains are flattened in declaration order, and the configs are merged left to
right so that children override parents and the site overrides everything.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from .ancestry import process_themes, read_declarations
from .merge import merge_configs, plugin_list
from .models.theme import PLUGINS_KEY, CompositionMode, CompositionResult, ResolvedTheme, ThemeChain
from .resolver import ThemeResolver

logger = logging.getLogger(__name__)

MergeFn = Callable[[Mapping[str, Any], Mapping[str, Any]], Dict[str, Any]]


def flatten_chains(chains: List[ThemeChain]) -> List[ResolvedTheme]:
    return [theme for chain in chains for theme in chain]


def inject_theme(theme: ResolvedTheme) -> Dict[str, Any]:
    """Return the theme's config with the theme itself appended to its plugins.

    The theme goes last so the plugins it declares run before its own hooks.
    """
    theme_config = theme.theme_config or {}
    return {
        **theme_config,
        PLUGINS_KEY: [
            *plugin_list(theme_config),
            theme.plugin_entry().model_dump(),
        ],
    }


async def compose_themes(
    site_config: Mapping[str, Any],
    mode: Optional[CompositionMode] = None,
    resolver: Optional[ThemeResolver] = None,
    merge: MergeFn = merge_configs,
) -> CompositionResult:
    """Compose a site config with every theme it declares.

    Args:
        site_config: The site's own configuration, not modified
        mode: Selects ``plugins`` or the legacy ``__experimentalThemes`` list
        resolver: Resolver used for every theme
        merge: Ordered merge of two configs

    Returns:
        The merged config and the flattened list of resolved themes

    Raises:
        MalformedDeclarationError: If a declaration cannot be parsed
        CyclicThemeError: If a theme's ancestry contains itself
    """
    mode = mode or CompositionMode()
    resolver = resolver or ThemeResolver()

    declarations = read_declarations(site_config, mode.themes_key)
    chains = await process_themes(declarations, mode, resolver)
    themes = flatten_chains(chains)
    logger.debug("Flattened themes: %s", [theme.theme_name for theme in themes])

    themes_config: Dict[str, Any] = {}
    for theme in themes:
        themes_config = merge(themes_config, inject_theme(theme))

    return CompositionResult(config=merge(themes_config, site_config), themes=themes)


def compose_themes_sync(
    site_config: Mapping[str, Any],
    mode: Optional[CompositionMode] = None,
    resolver: Optional[ThemeResolver] = None,
    merge: MergeFn = merge_configs,
) -> CompositionResult:
    """Run compose_themes to completion in a new event loop."""
    return asyncio.run(compose_themes(site_config, mode, resolver, merge))
