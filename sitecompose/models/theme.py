"""Theme models for sitecompose."""

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..exceptions import MalformedDeclarationError

PLUGINS_KEY = "plugins"
LEGACY_THEMES_KEY = "__experimentalThemes"


class ThemeDeclaration(BaseModel):
    """A theme declared as a record with options."""

    model_config = ConfigDict(extra="allow")

    resolve: str = Field(..., description="Package name of the theme")
    options: Dict[str, Any] = Field(default_factory=dict, description="Options passed to the theme")

    @field_validator("resolve")
    @classmethod
    def validate_resolve(cls, v: str) -> str:
        """Validate the package name is not blank."""
        if not v.strip():
            raise ValueError("resolve cannot be empty")
        return v


Declaration = Union[str, ThemeDeclaration]


def parse_declaration(raw: Any, index: Optional[int] = None, list_key: str = PLUGINS_KEY) -> Declaration:
    """Turn a raw list entry into a declaration.

    Args:
        raw: Entry as written in a configuration
        index: Position of the entry in its list, used in error messages
        list_key: Config key the list was read from

    Returns:
        The package name string, or a ThemeDeclaration record

    Raises:
        MalformedDeclarationError: If the entry is not a usable declaration
    """
    if isinstance(raw, ThemeDeclaration):
        return raw

    position = f"{list_key}[{index}]" if index is not None else list_key

    if isinstance(raw, str):
        if not raw.strip():
            raise MalformedDeclarationError(
                f"Empty theme name at {position}",
                list_key=list_key,
                index=index,
                declaration=raw,
            )
        return raw

    if isinstance(raw, Mapping):
        resolve = raw.get("resolve")
        if not isinstance(resolve, str) or not resolve.strip():
            raise MalformedDeclarationError(
                f"Theme declaration at {position} needs a non-empty string 'resolve', got {raw!r}",
                list_key=list_key,
                index=index,
                declaration=raw,
            )
        options = raw.get("options")
        if options is not None and not isinstance(options, Mapping):
            raise MalformedDeclarationError(
                f"Options of theme '{resolve}' at {position} must be a mapping, "
                f"got {type(options).__name__}",
                list_key=list_key,
                index=index,
                declaration=raw,
            )
        data = dict(raw)
        data["options"] = dict(options or {})
        try:
            return ThemeDeclaration(**data)
        except (ValidationError, TypeError) as e:
            raise MalformedDeclarationError(
                f"Theme declaration at {position} is invalid: {e}",
                list_key=list_key,
                index=index,
                declaration=raw,
            ) from e

    raise MalformedDeclarationError(
        f"Theme declaration at {position} must be a string or a mapping with 'resolve', "
        f"got {type(raw).__name__}",
        list_key=list_key,
        index=index,
        declaration=raw,
    )


def declaration_name(declaration: Declaration) -> str:
    if isinstance(declaration, ThemeDeclaration):
        return declaration.resolve
    return declaration


def declaration_options(declaration: Declaration) -> Dict[str, Any]:
    if isinstance(declaration, ThemeDeclaration):
        return dict(declaration.options)
    return {}


class PluginEntry(BaseModel):
    """A theme as it appears in a merged plugin list."""

    resolve: str
    options: Dict[str, Any] = Field(default_factory=dict)


class ResolvedTheme(BaseModel):
    """A declaration together with the config and directory it resolved to.

    ``theme_config`` and ``theme_directory`` are None when the declaration
    did not resolve to an installed package, e.g. a local plugin.
    """

    model_config = ConfigDict(frozen=True)

    theme_name: str
    theme_config: Optional[Dict[str, Any]] = None
    theme_declaration: Union[str, ThemeDeclaration]
    theme_directory: Optional[Path] = None

    @property
    def options(self) -> Dict[str, Any]:
        return declaration_options(self.theme_declaration)

    @property
    def identity(self) -> str:
        """Key identifying this theme on a resolution path."""
        if self.theme_directory is not None:
            return str(self.theme_directory)
        return self.theme_name

    def plugin_entry(self) -> PluginEntry:
        return PluginEntry(resolve=self.theme_name, options=self.options)


ThemeChain = List[ResolvedTheme]


class CompositionMode(BaseModel):
    """Selects which config key holds the theme-bearing list."""

    model_config = ConfigDict(frozen=True)

    use_legacy_themes: bool = False

    @property
    def themes_key(self) -> str:
        return LEGACY_THEMES_KEY if self.use_legacy_themes else PLUGINS_KEY


class CompositionResult(BaseModel):
    """Merged configuration plus the flattened, ordered theme list."""

    config: Dict[str, Any]
    themes: List[ResolvedTheme] = Field(default_factory=list)

    def theme_names(self) -> List[str]:
        return [theme.theme_name for theme in self.themes]
