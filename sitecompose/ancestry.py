"""Recursive resolution of parent themes."""

import logging
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from .exceptions import CyclicThemeError, MalformedDeclarationError
from .models.theme import (
    CompositionMode,
    Declaration,
    ResolvedTheme,
    ThemeChain,
    parse_declaration,
)
from .resolver import ThemeResolver

logger = logging.getLogger(__name__)


def read_declarations(config: Optional[Mapping[str, Any]], list_key: str, owner: str = "site") -> List[Declaration]:
    """Parse the theme-bearing list of a config.

    Args:
        config: Configuration to read from, may be None
        list_key: Key holding the list
        owner: Who the config belongs to, for error messages

    Returns:
        Parsed declarations in list order; empty if the key is absent

    Raises:
        MalformedDeclarationError: If the list or one of its entries is malformed
    """
    if not config:
        return []
    raw_list = config.get(list_key)
    if not raw_list:
        return []
    if not isinstance(raw_list, (list, tuple)):
        raise MalformedDeclarationError(
            f"'{list_key}' of {owner} must be a list, got {type(raw_list).__name__}",
            list_key=list_key,
            declaration=raw_list,
        )
    return [parse_declaration(raw, index, list_key) for index, raw in enumerate(raw_list)]


async def process_theme(
    resolved: ResolvedTheme,
    mode: Optional[CompositionMode] = None,
    resolver: Optional[ThemeResolver] = None,
    _path: Tuple[ResolvedTheme, ...] = (),
) -> ThemeChain:
    """Resolve the ancestry of a theme.

    Parent themes are resolved one at a time in declaration order, each
    one's own ancestry before the next sibling starts.

    Args:
        resolved: Theme whose parents to resolve
        mode: Selects the config key holding parent declarations
        resolver: Resolver used for the parents

    Returns:
        Flat chain, root ancestors first and ``resolved`` last

    Raises:
        CyclicThemeError: If a theme is reached again through its own parents
    """
    mode = mode or CompositionMode()
    resolver = resolver or ThemeResolver()

    for index, ancestor in enumerate(_path):
        if ancestor.identity == resolved.identity:
            cycle = [theme.theme_name for theme in _path[index:]] + [resolved.theme_name]
            raise CyclicThemeError(cycle)

    declarations = read_declarations(
        resolved.theme_config, mode.themes_key, owner=f"theme '{resolved.theme_name}'"
    )
    if not declarations:
        return [resolved]

    path = _path + (resolved,)
    chain: ThemeChain = []
    for declaration in declarations:
        parent = await resolver.resolve_theme(declaration)
        chain.extend(await process_theme(parent, mode, resolver, path))
    chain.append(resolved)

    logger.debug(
        "Theme '%s' chain: %s",
        resolved.theme_name,
        " -> ".join(theme.theme_name for theme in chain),
    )
    return chain


async def process_themes(
    declarations: Sequence[Declaration],
    mode: Optional[CompositionMode] = None,
    resolver: Optional[ThemeResolver] = None,
) -> List[ThemeChain]:
    """Resolve and process each declaration in order, one chain per declaration."""
    mode = mode or CompositionMode()
    resolver = resolver or ThemeResolver()

    chains: List[ThemeChain] = []
    for declaration in declarations:
        resolved = await resolver.resolve_theme(declaration)
        chains.append(await process_theme(resolved, mode, resolver))
    return chains
