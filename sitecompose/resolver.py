"""Theme resolution.

Turns a single theme declaration into a ResolvedTheme by locating the theme
package and loading the configuration it ships. Declarations that do not
resolve to a package (local plugins, for example) come back without a
config or directory; that is not an error.
"""

import inspect
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from .exceptions import ConfigLoadError
from .loader import CONFIG_FILE_STEM, ConfigFileLoader, PackageResolver, normalize_default_export
from .models.theme import (
    Declaration,
    ResolvedTheme,
    declaration_name,
    declaration_options,
    parse_declaration,
)

logger = logging.getLogger(__name__)

PackageResolveFn = Callable[[str], Union[Path, str, Awaitable[Union[Path, str]]]]
LoadConfigFileFn = Callable[[Path, str], Any]
NormalizeFn = Callable[[Any], Any]


async def _settle(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class ThemeResolver:
    """Resolves theme declarations through pluggable collaborators.

    Each collaborator may be a plain function or a coroutine function.
    """

    def __init__(
        self,
        package_resolve: Optional[PackageResolveFn] = None,
        load_config_file: Optional[LoadConfigFileFn] = None,
        normalize: NormalizeFn = normalize_default_export,
        config_file_stem: str = CONFIG_FILE_STEM,
    ) -> None:
        """Initialize the resolver.

        Args:
            package_resolve: Maps a theme name to its directory, raising
                ModuleNotFoundError when there is no such package
            load_config_file: Reads the raw config value from a directory
            normalize: Unwraps the exported config value
            config_file_stem: Config file name without extension
        """
        self.package_resolve = package_resolve or PackageResolver()
        self.load_config_file = load_config_file or ConfigFileLoader()
        self.normalize = normalize
        self.config_file_stem = config_file_stem

    async def resolve_theme(self, declaration: Union[Declaration, Mapping[str, Any]]) -> ResolvedTheme:
        """Resolve a declaration to the theme's own configuration.

        Args:
            declaration: Theme name, or record with ``resolve`` and ``options``

        Returns:
            The resolved theme; without config and directory if the name is
            not an installed package

        Raises:
            MalformedDeclarationError: If the declaration cannot be parsed
            ConfigLoadError: If the theme config cannot be loaded
        """
        declaration = parse_declaration(declaration)
        theme_name = declaration_name(declaration)

        try:
            theme_directory = await _settle(self.package_resolve(theme_name))
        except ModuleNotFoundError:
            logger.debug("Theme '%s' is not an installed package, treating it as a plugin", theme_name)
            return ResolvedTheme(theme_name=theme_name, theme_declaration=declaration)

        theme_directory = Path(theme_directory)
        raw = await _settle(self.load_config_file(theme_directory, self.config_file_stem))
        theme_config = self.normalize(raw)

        # Config factories receive the theme's options.
        if callable(theme_config):
            theme_config = await _settle(theme_config(declaration_options(declaration)))

        if theme_config is not None and not isinstance(theme_config, Mapping):
            raise ConfigLoadError(
                f"Config of theme '{theme_name}' must be a mapping, got {type(theme_config).__name__}",
                details={"theme_directory": str(theme_directory)},
            )

        if theme_config is not None:
            bad_keys = [key for key in theme_config if not isinstance(key, str)]
            if bad_keys:
                raise ConfigLoadError(
                    f"Config of theme '{theme_name}' has non-string keys: {bad_keys!r}",
                    details={"theme_directory": str(theme_directory)},
                )

        logger.debug("Resolved theme '%s' at %s", theme_name, theme_directory)
        return ResolvedTheme(
            theme_name=theme_name,
            theme_config=dict(theme_config) if theme_config is not None else None,
            theme_declaration=declaration,
            theme_directory=theme_directory,
        )


async def resolve_theme(
    declaration: Union[Declaration, Mapping[str, Any]],
    resolver: Optional[ThemeResolver] = None,
) -> ResolvedTheme:
    """Resolve a declaration with the given or a default resolver."""
    return await (resolver or ThemeResolver()).resolve_theme(declaration)
